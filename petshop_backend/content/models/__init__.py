from .blog import BlogPost
from .home import Announcement, Banner
from .page import POLICY_SLUGS, Page

__all__ = ["BlogPost", "Page", "POLICY_SLUGS", "Announcement", "Banner"]
