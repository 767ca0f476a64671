"""Parámetros por defecto del motor de series."""

# Pasos de la suma de Riemann para una integral sin caché
DEFAULT_INTEGRAL_STEPS = 1000

# Parte imaginaria tolerada al pedir un valor real
REAL_TOLERANCE = 1e-10

# Punto (x = n) en el que se evalúan las subexpresiones constantes
FOLD_SAMPLE_POINT = 1

USE_ARBITRARY_PRECISION = False
AP_WORKING_DIGITS = 30

DEFAULT_ANGLE_MODE = "rad"

LOG_LEVEL = "WARNING"
