"""Pydantic request/response models: user.py (accounts, session claims), post.py, common.py (errors, health)."""
