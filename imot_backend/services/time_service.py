"""
Servicio de fecha y hora local
"""
from datetime import datetime
import pytz

SOFIA_TZ = pytz.timezone('Europe/Sofia')


def get_local_now() -> datetime:
    """Obtener la hora actual en timezone de Bulgaria"""
    return datetime.now(SOFIA_TZ)


def get_current_year() -> int:
    """Año actual en timezone de Bulgaria"""
    return get_local_now().year
