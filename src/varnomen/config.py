import argparse
import copy
import json
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import POSITION_TYPE
from .reference.constants import (
    FLANK_LENGTH,
    SPLICE_REGION_EXONIC_LENGTH,
    SPLICE_REGION_INTRONIC_LENGTH,
    SPLICE_SITE_LENGTH,
)
from .schemas import CONFIG_SCHEMA, DEFAULTS, get_by_prefix, validate
from .util import cast_boolean, filepath, get_env_variable

STRUCTURAL_VARIANT_MIN_LENGTH: int = 1000
SV_MAX_DISPLAYED_SEQUENCE_LENGTH: int = 3


@dataclass(frozen=True)
class AnnotationOptions:
    """
    the settings controlling how variants are classified

    Attributes:
        upstream_length: length of the region upstream of a transcript
        downstream_length: length of the region downstream of a transcript
        splice_site_length: number of intronic bases of the donor/acceptor sites
        splice_region_exonic_length: number of exonic bases of the splice region
        splice_region_intronic_length: how far into the intron the splice region extends
        structural_variant_min_length: minimum allele length of structural variants (0 to disable)
        sv_max_displayed_sequence_length: longer sequences are shortened in structural variant descriptions
    """

    upstream_length: int = FLANK_LENGTH
    downstream_length: int = FLANK_LENGTH
    splice_site_length: int = SPLICE_SITE_LENGTH
    splice_region_exonic_length: int = SPLICE_REGION_EXONIC_LENGTH
    splice_region_intronic_length: int = SPLICE_REGION_INTRONIC_LENGTH
    structural_variant_min_length: int = STRUCTURAL_VARIANT_MIN_LENGTH
    sv_max_displayed_sequence_length: int = SV_MAX_DISPLAYED_SEQUENCE_LENGTH

    def __post_init__(self):
        for name, value in self.__dict__.items():
            if value < 0:
                raise ValueError(f'{name} cannot be negative', value)
        if self.splice_region_intronic_length < self.splice_site_length:
            raise ValueError(
                'the splice region must extend past the splice site',
                self.splice_region_intronic_length,
                self.splice_site_length,
            )

    @classmethod
    def from_config(cls, config: Dict) -> 'AnnotationOptions':
        settings = get_by_prefix(config, 'annotate.')
        return cls(**{k: v for k, v in settings.items() if k in cls.__dataclass_fields__})

    def region_settings(self) -> Dict[str, int]:
        """the keyword arguments for TranscriptRegions"""
        return {
            'upstream_length': self.upstream_length,
            'downstream_length': self.downstream_length,
            'splice_site_length': self.splice_site_length,
            'splice_region_exonic_length': self.splice_region_exonic_length,
            'splice_region_intronic_length': self.splice_region_intronic_length,
        }


def validate_config(config: Optional[Dict] = None) -> Dict:
    """
    check a config against the schema, fill in the defaults and apply any environment variable
    overrides (VARNOMEN_<KEY> with the dots of the key replaced by underscores)

    Returns:
        a new dict with all settings present
    """
    config = copy.deepcopy(config) if config else {}
    validate(config, CONFIG_SCHEMA, set_default=True)
    for key, default in DEFAULTS.items():
        if isinstance(default, (bool, int, float, str)):
            config[key] = get_env_variable(key, config[key], cast_type=type(default))
    validate(config, CONFIG_SCHEMA)
    POSITION_TYPE.enforce(config['input.position_type'])
    return config


def load_config(filename: str) -> Dict:
    with open(filename, 'r') as fh:
        return validate_config(json.load(fh))


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type == float:
        return 'FLOAT'
    elif arg_type == int:
        return 'INT'
    elif arg_type == filepath:
        return 'FILEPATH'
    return None
