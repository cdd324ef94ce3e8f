"""Line classification, turret state tracking and validation rules."""
