"""
classgallery - Class photo and video sharing portal built with Streamlit

A small portal where a class admin manages the student roster and shares media:
- Student roster management with per-student logins
- Photo and video upload to a third-party media host
- Moderation of student uploads (pending / approved / rejected)
- Remote table backend with a local fallback store
"""

__version__ = "0.1.0"
__author__ = "classgallery"
__description__ = "Class photo and video sharing portal with Streamlit"
