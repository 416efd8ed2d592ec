"""
Driver Telemetry API: Service Layer
======================================

What:  Business logic, independent of HTTP.

    - driver_service.py:   driver registration and listing
    - reading_service.py:  generic reading component (heart rate, compass,
                           location) and the combined latest query
    - purge_service.py:    bulk delete of every record

Services never hold a store themselves; routes inject it per call.
"""
