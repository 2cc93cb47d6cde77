"""Room environment - ambient disturbance from the door at one end of the row"""

ROOM_TEMPERATURE = 25.0       # Celsius
OUTSIDE_TEMPERATURE_NEAR = 0.0   # Celsius, at the door
OUTSIDE_TEMPERATURE_FAR = 15.0   # Celsius, far end of the row


def open_door(incubators, near=OUTSIDE_TEMPERATURE_NEAR, far=OUTSIDE_TEMPERATURE_FAR):
    """
    Drop each incubator's ambient temperature linearly with its distance
    from the door: index 0 gets `near`, later units approach `far`.
    """
    count = len(incubators)
    for i, incubator in enumerate(incubators):
        incubator.set_ambient_temperature(near + (far - near) * i / count)


def close_door(incubators, room_temperature=ROOM_TEMPERATURE):
    """Reset every incubator's ambient temperature to room temperature."""
    for incubator in incubators:
        incubator.set_ambient_temperature(room_temperature)
