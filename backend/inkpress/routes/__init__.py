# Routes package init
"""
Inkpress Backend - API Routes Package
======================================

Route Inventory:
    - auth.py:    POST /register, POST /login, GET /profile, POST /logout
    - posts.py:   POST /post, PUT /post, GET /post, GET /post/{id}
    - health.py:  GET  /health

Static uploads are mounted by main.create_app() under /uploads.

Routes stay thin: extract request data, call a service, shape the response.
"""
