import inspect
from collections.abc import Mapping

from diagnostics import config_log_level, resolve_sink

class SchemaError(Exception):
    pass

class _Missing:
    """
    Stands in for a property the candidate does not own.
    """
    def __repr__(self):
        return 'MISSING'

    def __bool__(self):
        return False

MISSING = _Missing()

# Values that are never accepted as the object being validated
PRIMITIVES = (str, bytes, bytearray, int, float, complex, bool)

def type_name(value):
    """
    Reliable name for the type of a value ('str', 'dict', 'Null', ...).
    Never raises.
    """
    if value is None:
        return 'Null'
    if value is MISSING:
        return 'Undefined'

    # __class__ can be faked or broken on proxies
    try:
        name = value.__class__.__name__
        if isinstance(name, str):
            return name
    except Exception:
        pass

    return type(value).__name__

def tag_name(tag):
    """
    Name of an expected type tag: a class, a type name string or None.
    """
    if tag is None or tag is type(None):
        return 'Null'
    if tag is MISSING:
        return 'Undefined'
    if isinstance(tag, str):
        return tag

    try:
        name = tag.__name__
        if isinstance(name, str):
            return name
    except Exception:
        pass

    # Not a type, no value can match it
    return repr(tag)

def is_object(data):
    if data is None or data is MISSING:
        return False
    if isinstance(data, PRIMITIVES):
        return False
    # Functions and classes are not data
    return not (inspect.isroutine(data) or inspect.isclass(data))

def own_value(data, key):
    """
    Value the candidate holds directly under key, or MISSING. Class level
    attributes are inherited and do not count.
    """
    try:
        if isinstance(data, Mapping):
            return data[key] if key in data else MISSING

        if isinstance(data, (list, tuple)):
            return _index_value(data, key)

        attrs = getattr(data, '__dict__', None)
        if isinstance(attrs, dict) and key in attrs:
            return attrs[key]

        if isinstance(key, str) and key in _slot_names(type(data)):
            return getattr(data, key, MISSING)
    except Exception:
        pass

    return MISSING

def _index_value(data, key):
    if isinstance(key, bool):
        return MISSING
    if isinstance(key, str) and key.isdigit():
        key = int(key)
    if isinstance(key, int) and 0 <= key < len(data):
        return data[key]
    return MISSING

def _slot_names(cls):
    names = set()
    for klass in cls.__mro__:
        slots = klass.__dict__.get('__slots__', ())
        if isinstance(slots, str):
            slots = (slots,)
        names.update(slots)
    return names

def expected_types(rules):
    types = rules['type']
    if isinstance(types, (list, tuple)):
        return list(types)
    return [types]

def object_validator(schema, config=None, *, log=None):
    """
    Build a reusable validator function for a schema.

    :param schema: mapping of property name -> rules. Rules are mappings
                   with the optional keys 'required', 'type' and 'validator'.
    :param config: optional mapping, only 'logLevel' (or 'log_level') is recognized
                   ('error', 'warn', 'log'). Defaults to 'error'.
    :param log: diagnostic facility, a Logger or an AppDaemon style log callable
    :return: a function taking the candidate and returning True/False
    """
    if not isinstance(schema, Mapping):
        raise SchemaError("Schema must be a mapping")

    log = resolve_sink(config_log_level(config), log)

    def validator(data):
        is_valid = True

        if not is_object(data):
            log(f"[Validation Error] Invalid data provided. Expected 'Object' but received '{type_name(data)}'.")
            return False

        for key, rules in schema.items():
            value = own_value(data, key)

            if not isinstance(rules, Mapping):
                log(f"[Schema Error] Invalid schema rule for property '{key}'. Expected 'Object'.")
                is_valid = False
                continue

            if rules.get('required') and value is MISSING:
                log(f"[Validation Error] Missing required property: '{key}'")
                is_valid = False
                continue

            # Optional and absent, nothing more to check
            if value is MISSING:
                continue

            if 'type' in rules:
                expected_names = [tag_name(t) for t in expected_types(rules)]
                actual_name = type_name(value)

                if actual_name not in expected_names:
                    expected = ' or '.join(expected_names)
                    log(f"[Validation Error] Invalid type for property '{key}'. Expected '{expected}' but received '{actual_name}'.")
                    is_valid = False

            # Runs even when the type check failed. Nested validators do
            # their own logging, so only the result is used here.
            check = rules.get('validator')
            if callable(check):
                try:
                    if not check(value):
                        is_valid = False
                except Exception as e:
                    log(f"[Validator Error] An exception occurred while executing custom validator for property '{key}': {e}")
                    is_valid = False

        return is_valid

    validator.schema = schema
    return validator
