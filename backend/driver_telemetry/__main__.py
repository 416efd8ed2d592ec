from driver_telemetry.main import run

run()
