# Importing the package registers every table on Base.metadata
from inkpress.models.post import Post
from inkpress.models.user import User

__all__ = ["Post", "User"]
