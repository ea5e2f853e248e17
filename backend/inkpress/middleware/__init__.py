# Middleware package init
"""
Inkpress Backend - Middleware Package
======================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [Security Headers] → [GZip] → [CORS] → Route

    1. Request ID first so every later log line carries it
    2. Logging measures the full duration including the inner layers
    3. Security headers are stamped on every response, errors included
"""
