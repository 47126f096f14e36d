import collections.abc
import json
import os

from jsonschema import Draft7Validator, validators

CONFIG_SCHEMA = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(collections.abc.Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def _extend_with_default(validator_class):
    validate_properties = validator_class.VALIDATORS['properties']

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if 'default' in subschema and isinstance(instance, dict):
                instance.setdefault(prop, subschema['default'])
        for error in validate_properties(validator, properties, instance, schema):
            yield error

    return validators.extend(validator_class, {'properties': set_defaults})


DefaultValidatingValidator = _extend_with_default(Draft7Validator)


def load_schema(filename: str = CONFIG_SCHEMA):
    with open(filename, 'r') as fh:
        return json.load(fh)


def validate(data, filename: str, set_default: bool = False):
    """
    validate data against a JSON schema file

    Args:
        data: the object to validate
        filename: path to the schema
        set_default: fill in missing properties of the data with the schema defaults

    Raises:
        jsonschema.ValidationError: the data does not match the schema
    """
    schema = load_schema(filename)
    if set_default:
        DefaultValidatingValidator(schema).validate(data)
    else:
        Draft7Validator(schema).validate(data)


def get_by_prefix(config, prefix):
    return {k.replace(prefix, ''): v for k, v in config.items() if k.startswith(prefix)}


DEFAULTS = {}
validate(DEFAULTS, CONFIG_SCHEMA, set_default=True)
DEFAULTS = ImmutableDict(DEFAULTS)
