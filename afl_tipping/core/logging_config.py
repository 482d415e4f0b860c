"""
Configuración de logging para toda la app
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Nivel y formato del logger raíz. Llamar una vez al arrancar."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO  # nivel desconocido en LOG_LEVEL

    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    # motor/pymongo son muy verbosos en DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
