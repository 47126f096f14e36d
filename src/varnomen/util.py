import errno
import logging
import os
from glob import glob
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from braceexpand import braceexpand

from .constants import COLUMNS, POSITION_TYPE, sort_columns
from .error import InvalidGenomeChange
from .reference.position import HG19, GenomePosition, ReferenceDictionary
from .reference.variant import GenomeVariant

ENV_VAR_PREFIX = 'VARNOMEN_'

logger = logging.getLogger('varnomen')

NULL_VALUES = ['None', 'none', 'N/A', 'n/a', 'null', 'NULL', 'Null', 'nan', '<NA>', 'NaN']


def cast_null(input_value):
    value = str(input_value).lower()
    if value in ['none', 'null']:
        return None
    raise TypeError('casting to null/None failed', input_value)


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


def cast(value, cast_func):
    """
    cast a value to a given type

    Example:
        >>> cast('1', int)
        1
    """
    if cast_func == bool:
        value = cast_boolean(value)
    else:
        value = cast_func(value)
    return value


def get_env_variable(arg, default, cast_type=None):
    """
    Args:
        arg (str): the argument/variable name
    Returns:
        the setting from the environment variable if given, otherwise the default value
    """
    if cast_type is None:
        cast_type = type(default)
    name = ENV_VAR_PREFIX + str(arg).replace('.', '_').upper()
    result = os.environ.get(name, None)
    if result is not None:
        return cast(result, cast_type)
    return default


def bash_expands(*expressions):
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        list: a list of files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    if len(file_list) > 1:
        raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg}= {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the
    directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def read_variants_file(filename: str) -> List[Dict[str, Any]]:
    """
    reads a tab-delimited file of variants. The chr, pos, ref and alt columns are required, any
    other columns are kept as is. Empty alleles may be given as '-' or left blank

    Returns:
        the rows of the file
    """
    try:
        df = pd.read_csv(
            filename,
            dtype={COLUMNS.chr: str, COLUMNS.pos: pd.Int64Dtype(), COLUMNS.ref: str, COLUMNS.alt: str},
            sep='\t',
            comment='#',
            keep_default_na=False,
            na_values={COLUMNS.pos: NULL_VALUES + ['']},
        )
    except pd.errors.EmptyDataError:
        return []

    for col in [COLUMNS.chr, COLUMNS.pos, COLUMNS.ref, COLUMNS.alt]:
        if col not in df:
            raise KeyError(f'missing required column: {col}')
    if df[COLUMNS.pos].isnull().any():
        raise ValueError('all variants require a position', filename)
    df[COLUMNS.pos] = df[COLUMNS.pos].astype(int)
    return df.to_dict('records')


def read_inputs(inputs: List[str]) -> List[Dict[str, Any]]:
    rows = []

    for finput in bash_expands(*inputs):
        logger.info(f'loading: {finput}')
        rows.extend(read_variants_file(finput))
    logger.info(f'loaded {len(rows)} variants')
    return rows


def variant_from_row(
    row: Dict[str, Any],
    ref_dict: ReferenceDictionary = HG19,
    pos_type: str = POSITION_TYPE.ONE_BASED,
) -> GenomeVariant:
    """
    create the forward strand variant described by an input row

    Raises:
        InvalidGenomeChange: the alleles are malformed or the contig is unknown
    """
    chr = str(row[COLUMNS.chr])
    if chr not in ref_dict:
        raise InvalidGenomeChange('contig is not in the reference dictionary', chr)
    pos = GenomePosition(ref_dict, chr, row[COLUMNS.pos], pos_type=pos_type)
    if pos.pos < 0 or pos.pos > ref_dict.contig_length(chr):
        raise InvalidGenomeChange('position is outside the contig', chr, row[COLUMNS.pos])
    return GenomeVariant(pos, row[COLUMNS.ref], row[COLUMNS.alt])


def output_tabbed_file(rows: Iterable, filename: str, header: Optional[List[str]] = None):
    if header is None:
        custom_header = False
        header = set()
    else:
        custom_header = True
    records = []
    for row in rows:
        if not isinstance(row, dict):
            row = row.flatten()
        records.append(row)
        if not custom_header:
            header.update(row.keys())  # type: ignore
    header = sort_columns(header)
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(records, columns=header)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')
