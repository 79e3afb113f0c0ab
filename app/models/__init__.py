from app.models.users import User
from app.models.routes import Route, Waypoint
from app.models.reviews import Review
from app.models.favorites import Favorite
from app.models.photos import Photo

__all__ = ["User", "Route", "Waypoint", "Review", "Favorite", "Photo"]
