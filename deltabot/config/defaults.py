"""
Default configuration values for deltabot
Geometry, calibration samples, waypoints and transport settings
"""

# ==================== GEOMETRY ====================

# Example geometry (mm). Edges are the side lengths of the equilateral
# base and effector triangles.
GEOMETRY_DEFAULTS = {
    "effector_edge": 30.0,
    "base_edge": 60.0,
    "upper_arm_length": 50.0,
    "lower_arm_length": 80.0,
    "min_angle_deg": -85.0,     # Fully extended
    "max_angle_deg": 28.0,      # Fully retracted (home)
    "steps_per_rev": 1600,
    "gear_ratio": 9.0,
    "z_offset": 11.2            # Reference height where the arms read 0°
}

# Arm attachment angles around the base centre (degrees)
ARM_ANGLES = (0.0, 120.0, 240.0)

# ==================== CALIBRATION ====================

# Measured on the test rig with all three arms at the same angle.
# Angles are read off the protractor in [0, 360).
CALIBRATION_SAMPLES = [
    {"z": 20.0, "angle": 47.0},
    {"z": 30.0, "angle": 19.0},
    {"z": 40.0, "angle": 4.5},
    {"z": 50.0, "angle": 353.0},
    {"z": 60.0, "angle": 343.5},
    {"z": 70.0, "angle": 334.5},
    {"z": 80.0, "angle": 325.5},
    {"z": 90.0, "angle": 316.5},
    {"z": 100.0, "angle": 306.0},
    {"z": 110.0, "angle": 293.0}
]

# What to do when a move falls outside the calibrated heights
CALIBRATION_DEFAULTS = {
    "out_of_range": "zero"      # "zero" or "reject"
}

# ==================== PATH ====================

# Demo square walked by `deltabot path`
DEFAULT_WAYPOINTS = [
    (0.0, 0.0, 60.0),
    (20.0, 20.0, 60.0),
    (-20.0, 20.0, 60.0),
    (-20.0, -20.0, 60.0),
    (20.0, -20.0, 60.0),
    (20.0, 20.0, 60.0),
    (0.0, 0.0, 60.0),
    (0.0, 0.0, 25.0)
]

PATH_DEFAULTS = {
    "move_delay": 0.5,          # Seconds between waypoints
    "home_settle_time": 2.0     # Seconds for limit switches to stop the motors
}

# ==================== COMMUNICATION ====================

TRANSPORT_DEFAULTS = {
    "kind": "file",             # "file", "remote" or "serial"
    "frame_format": "basic",    # "basic" or "extended"
    "device_path": "/tmp/delta_command.bin",
    "host": "raspberrypi.local",
    "remote_path": "/tmp/delta_command.bin",
    "remote_device": "/dev/delta_robot",
    "port": "/dev/ttyUSB0",
    "baudrate": 115200,
    "timeout": 2.0
}

# Extended frame motion profile
MOTION_PROFILE_DEFAULTS = {
    "target_freq": 400,         # Pulses per second at cruise
    "accel_pulses": 100,
    "decel_pulses": 100
}
