from sqlalchemy.orm import class_mapper
from .dates import now_local, today_local, day_bounds, days_ago

def sqlalchemy_to_dict(obj):
    """Convert a SQLAlchemy object to a dictionary."""
    if not obj:
        return None
    mapper = class_mapper(obj.__class__)
    result = {}
    for c in mapper.columns:
        if c.key == "hashed_password":
            continue
        value = getattr(obj, c.key)
        # Convert datetime objects to ISO format strings
        if hasattr(value, 'isoformat'):
            value = value.isoformat()
        # Convert Decimal objects to floats
        elif hasattr(value, 'normalize') and hasattr(value, 'from_float'):  # Check if it's a Decimal
            value = float(value)
        # Convert enum types to strings
        elif hasattr(value, 'name') and hasattr(value, 'value'):  # Check if it's an enum
            value = value.value
        result[c.key] = value
    return result

__all__ = ['sqlalchemy_to_dict', 'now_local', 'today_local', 'day_bounds', 'days_ago']
