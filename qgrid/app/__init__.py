"""Application layer: state machine and the controller that schedules agent steps."""
