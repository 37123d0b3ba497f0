"""Runtime services (telemetry) shared by the compiler."""
