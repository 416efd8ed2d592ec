# Middleware package init
"""
Driver Telemetry API: Middleware Package
===========================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Security Headers] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Logging measures the full handling time including inner middleware
    3. Security headers are added to every response, errors included
    4. CORS answers preflight requests
"""
