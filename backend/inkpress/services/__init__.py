# Services package init
"""
Inkpress Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - UserService:  credential store (register, lookup, authenticate)
    - TokenService: session issuer (sign/verify cookie tokens)
    - FileService:  upload handler (store/cleanup cover images)
    - PostService:  content store (create, update, list, get)

Services receive their configuration through constructors; create_app()
builds one of each from Settings and keeps them on app.state.
"""
