# Routers package
from .maps import router as maps_router
from .properties import router as properties_router
from .documents import router as documents_router
from .evaluations import router as evaluations_router
from .valuations import router as valuations_router
from .photos import router as photos_router
