# Routes package init
"""
Driver Telemetry API: API Routes Package
===========================================

Route Inventory:
    - health.py:    GET    /health
    - drivers.py:   POST   /conductor
                    GET    /conductor/all
                    DELETE /conductor/all
    - readings.py:  POST   /ritmo | /brujula | /ubicacion
                    GET    /{kind}/all
                    GET    /{kind}/{conductorId}/latest
                    GET    /lectura/{conductorId}/latest

Routes stay thin: extract the input, call a service with the injected
store, shape the response. Business rules live in services.
"""
