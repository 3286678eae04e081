import os
from collections.abc import Mapping

import yaml

from diagnostics import config_log_level, logger, resolve_sink
from schema_validator import SchemaError, object_validator, type_name

# Keys that are compiled into a 'validator' when loading
NESTED_KEYS = ('schema', 'elements')

NULL_NAMES = ('null', 'none', 'None')

def load_schema(path, *, config=None, log=None):
    """
    Load one schema from a YAML file.

    Type names stay strings and are matched by name. Nested 'schema' and
    'elements' rules are turned into validators built with the same config.

    :param path: path of the YAML file
    :return: a schema dict ready for object_validator
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SchemaError(f"Can't read schema {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML in schema {path}: {e}") from e

    if not data:
        raise SchemaError(f"Empty schema file {path}")

    return build_schema(data, path=os.path.basename(path), config=config, log=log)

def build_schema(data, *, path="root", config=None, log=None):
    """
    Normalize a plain (YAML shaped) schema mapping.
    """
    if not isinstance(data, Mapping):
        raise SchemaError(f"{path} must be a mapping, got {type_name(data)}")

    schema = {}
    for key, rules in data.items():
        if not isinstance(rules, Mapping):
            # Reported by the validator at validation time
            schema[key] = rules
            continue
        schema[key] = _build_rule(rules, f"{path}.{key}", config, log)

    return schema

def _build_rule(rules, path, config, log):
    rule = {k: v for k, v in rules.items() if k not in NESTED_KEYS}

    if 'type' in rule:
        rule['type'] = _type_names(rule['type'], path)

    nested = [k for k in NESTED_KEYS if k in rules]
    if not nested:
        return rule

    if 'validator' in rules or len(nested) > 1:
        raise SchemaError(f"{path} can only have one of 'validator', 'schema' or 'elements'")

    sub_schema = build_schema(rules[nested[0]], path=path, config=config, log=log)
    inner = object_validator(sub_schema, config, log=log)

    if nested[0] == 'schema':
        rule['validator'] = inner
    else:
        rule['validator'] = each(inner, config=config, log=log)

    return rule

def _type_names(types, path):
    if isinstance(types, list):
        return [_type_name(t, path) for t in types]
    return _type_name(types, path)

def _type_name(name, path):
    if name is None or name in NULL_NAMES:
        return 'Null'
    if not isinstance(name, str):
        raise SchemaError(f"{path} type must be a type name, got {type_name(name)}")
    return name

def each(item_validator, *, config=None, log=None):
    """
    Validator for a list where every item must pass item_validator. All
    items are checked, failures are logged by item_validator.
    """
    log = resolve_sink(config_log_level(config), log)

    def validator(items):
        if not isinstance(items, (list, tuple)):
            log(f"[Validation Error] Invalid data provided. Expected 'list or tuple' but received '{type_name(items)}'.")
            return False

        results = [item_validator(item) for item in items]
        return all(results)

    return validator

class SchemaLoader:
    def __init__(self, folder, *, config=None, log=None):
        self.folder = folder
        self.config = config
        self.log = log
        self.sink = resolve_sink(config_log_level(config), log)

    def load_all(self):
        """
        Load every YAML schema in the folder.

        :return: dict of file name (without extension) -> validator
        """
        logger.info(f"Loading schemas from {self.folder}...")

        validators = {}

        for fname in sorted(os.listdir(self.folder)):
            if not fname.endswith((".yaml", ".yml")):
                continue

            path = os.path.join(self.folder, fname)

            try:
                schema = load_schema(path, config=self.config, log=self.log)
                validators[os.path.splitext(fname)[0]] = object_validator(
                    schema,
                    self.config,
                    log=self.log
                )

            except SchemaError as e:
                self.sink(f"[Schema Error] {fname}: {e}")

        return validators
