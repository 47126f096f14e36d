"""
module responsible for small utility functions and constants used throughout the varnomen package
"""
import re
from typing import Dict, List

from Bio.Data.IUPACData import protein_letters_1to3_extended
from Bio.Seq import Seq

PROGNAME: str = 'varnomen'
EXIT_OK: int = 0
EXIT_ERROR: int = 1


class VarnomenNamespace:
    """
    Namespace to hold module constants. Members are the public, non-callable class attributes

    Example:
        >>> class COLOUR(VarnomenNamespace):
        ...     RED: str = 'red'
        >>> COLOUR.values()
        ['red']
    """

    @classmethod
    def items(cls) -> List:
        return [
            (k, v)
            for k, v in vars(cls).items()
            if not k.startswith('_') and not callable(v) and not isinstance(v, classmethod)
        ]

    @classmethod
    def keys(cls) -> List[str]:
        return [k for k, v in cls.items()]

    @classmethod
    def values(cls) -> List:
        return [v for k, v in cls.items()]

    @classmethod
    def enforce(cls, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> STRAND.enforce('+')
            '+'
            >>> STRAND.enforce('x')
            Traceback (most recent call last):
            ....
            KeyError: 'value x is not a valid member of ', ['+', '-', '?']
        """
        if value not in cls.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), cls.values())
        return value

    @classmethod
    def reverse(cls, value) -> str:
        """
        for a given value, return the associated key
        """
        for key, val in cls.items():
            if val == value:
                return key
        raise KeyError('input value is not assigned to a key', value)


CODON_SIZE: int = 3
"""int: the number of bases making up a codon"""

START_AA: str = 'M'
"""str: The amino acid expected to be at the start of any CDS"""

STOP_AA: str = '*'
"""str: The amino acid expected to be at the end of any CDS"""

DNA_PATTERN = re.compile(r'^[ACGTN]*$')
"""the alleles accepted for a genomic variant"""

AA_LONG_NAMES: Dict[str, str] = dict(protein_letters_1to3_extended)
AA_LONG_NAMES[STOP_AA] = STOP_AA


def reverse_complement(s: str) -> str:
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s: the input DNA sequence

    Returns:
        str: the reverse complement of the input sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    return str(Seq(input_string).reverse_complement())


def translate(s: str, reading_frame: int = 0) -> str:
    """
    given a DNA sequence, translates it and returns the protein amino acid sequence. Any trailing
    partial codon is ignored

    Args:
        s: the input DNA sequence
        reading_frame: where to start translating the sequence

    Returns:
        the amino acid sequence
    """
    reading_frame = reading_frame % CODON_SIZE

    temp = s[reading_frame:]
    if len(temp) % 3 == 1:
        temp = temp[:-1]
    elif len(temp) % 3 == 2:
        temp = temp[:-2]
    return str(Seq(temp).translate())


def to_long_name(aa: str) -> str:
    """
    convert a sequence of 1-letter amino acid codes to their 3-letter codes. The stop symbol is kept as is

    Example:
        >>> to_long_name('M*')
        'Met*'
    """
    try:
        return ''.join([AA_LONG_NAMES[c] for c in aa])
    except KeyError as err:
        raise ValueError('unexpected amino acid symbol', aa) from err


class STRAND(VarnomenNamespace):
    """
    holds controlled vocabulary for allowed strand values

    Attributes:
        POS: the positive/forward strand
        NEG: the negative/reverse strand
        NS: strand is not specified
    """

    POS: str = '+'
    NEG: str = '-'
    NS: str = '?'

    @classmethod
    def compare(cls, first, second) -> bool:
        if cls.NS in {first, second}:
            return True
        return first == second

    @classmethod
    def flip(cls, strand: str) -> str:
        if strand == cls.POS:
            return cls.NEG
        elif strand == cls.NEG:
            return cls.POS
        return strand


class POSITION_TYPE(VarnomenNamespace):
    """
    the origin of input coordinates

    Attributes:
        ZERO_BASED: positions start at 0 and intervals are half-open
        ONE_BASED: positions start at 1 and intervals are closed
    """

    ZERO_BASED: str = 'zero_based'
    ONE_BASED: str = 'one_based'


class VARIANT_SHAPE(VarnomenNamespace):
    """
    the structural category of a genomic change, used to pick the annotation algorithm
    """

    SNV: str = 'snv'
    INSERTION: str = 'insertion'
    DELETION: str = 'deletion'
    BLOCK_SUBSTITUTION: str = 'block substitution'
    STRUCTURAL: str = 'structural'


class RANK_TYPE(VarnomenNamespace):
    EXON: str = 'exon'
    INTRON: str = 'intron'
    UNDEFINED: str = 'undefined'


INVALID_RANK: int = -1
"""int: rank used when an exon/intron rank is not applicable"""


class IMPACT(VarnomenNamespace):
    """
    putative impact of a variant effect, from most to least severe
    """

    HIGH: str = 'HIGH'
    MODERATE: str = 'MODERATE'
    LOW: str = 'LOW'
    MODIFIER: str = 'MODIFIER'


class VARIANT_EFFECT(VarnomenNamespace):
    """
    sequence ontology terms used to tag annotations. Members are listed in order of decreasing severity
    """

    TRANSCRIPT_ABLATION: str = 'transcript_ablation'
    SPLICE_ACCEPTOR_VARIANT: str = 'splice_acceptor_variant'
    SPLICE_DONOR_VARIANT: str = 'splice_donor_variant'
    STOP_GAINED: str = 'stop_gained'
    FRAMESHIFT_ELONGATION: str = 'frameshift_elongation'
    FRAMESHIFT_TRUNCATION: str = 'frameshift_truncation'
    FRAMESHIFT_VARIANT: str = 'frameshift_variant'
    STOP_LOST: str = 'stop_lost'
    START_LOST: str = 'start_lost'
    STRUCTURAL_VARIANT: str = 'structural_variant'
    INTERNAL_FEATURE_ELONGATION: str = 'internal_feature_elongation'
    FEATURE_TRUNCATION: str = 'feature_truncation'
    DISRUPTIVE_INFRAME_INSERTION: str = 'disruptive_inframe_insertion'
    DISRUPTIVE_INFRAME_DELETION: str = 'disruptive_inframe_deletion'
    INFRAME_INSERTION: str = 'inframe_insertion'
    INFRAME_DELETION: str = 'inframe_deletion'
    MNV: str = 'mnv'
    COMPLEX_SUBSTITUTION: str = 'complex_substitution'
    MISSENSE_VARIANT: str = 'missense_variant'
    SPLICE_REGION_VARIANT: str = 'splice_region_variant'
    STOP_RETAINED_VARIANT: str = 'stop_retained_variant'
    SYNONYMOUS_VARIANT: str = 'synonymous_variant'
    FIVE_PRIME_UTR_EXON_VARIANT: str = '5_prime_UTR_exon_variant'
    FIVE_PRIME_UTR_INTRON_VARIANT: str = '5_prime_UTR_intron_variant'
    THREE_PRIME_UTR_EXON_VARIANT: str = '3_prime_UTR_exon_variant'
    THREE_PRIME_UTR_INTRON_VARIANT: str = '3_prime_UTR_intron_variant'
    NON_CODING_TRANSCRIPT_EXON_VARIANT: str = 'non_coding_transcript_exon_variant'
    NON_CODING_TRANSCRIPT_INTRON_VARIANT: str = 'non_coding_transcript_intron_variant'
    CODING_TRANSCRIPT_INTRON_VARIANT: str = 'coding_transcript_intron_variant'
    UPSTREAM_GENE_VARIANT: str = 'upstream_gene_variant'
    DOWNSTREAM_GENE_VARIANT: str = 'downstream_gene_variant'
    INTERGENIC_VARIANT: str = 'intergenic_variant'

    @classmethod
    def severity(cls, effect: str) -> int:
        """
        rank of an effect, lower is more severe
        """
        return cls.values().index(cls.enforce(effect))

    @classmethod
    def sort(cls, effects) -> List[str]:
        return sorted(set(effects), key=cls.severity)

    @classmethod
    def impact(cls, effect: str) -> str:
        return EFFECT_IMPACT[cls.enforce(effect)]


EFFECT_IMPACT: Dict[str, str] = {}
for _effect in VARIANT_EFFECT.values():
    EFFECT_IMPACT[_effect] = IMPACT.MODIFIER
for _effect in [
    VARIANT_EFFECT.TRANSCRIPT_ABLATION,
    VARIANT_EFFECT.SPLICE_ACCEPTOR_VARIANT,
    VARIANT_EFFECT.SPLICE_DONOR_VARIANT,
    VARIANT_EFFECT.STOP_GAINED,
    VARIANT_EFFECT.FRAMESHIFT_ELONGATION,
    VARIANT_EFFECT.FRAMESHIFT_TRUNCATION,
    VARIANT_EFFECT.FRAMESHIFT_VARIANT,
    VARIANT_EFFECT.STOP_LOST,
    VARIANT_EFFECT.START_LOST,
    VARIANT_EFFECT.STRUCTURAL_VARIANT,
    VARIANT_EFFECT.INTERNAL_FEATURE_ELONGATION,
    VARIANT_EFFECT.FEATURE_TRUNCATION,
]:
    EFFECT_IMPACT[_effect] = IMPACT.HIGH
for _effect in [
    VARIANT_EFFECT.DISRUPTIVE_INFRAME_INSERTION,
    VARIANT_EFFECT.DISRUPTIVE_INFRAME_DELETION,
    VARIANT_EFFECT.INFRAME_INSERTION,
    VARIANT_EFFECT.INFRAME_DELETION,
    VARIANT_EFFECT.MNV,
    VARIANT_EFFECT.COMPLEX_SUBSTITUTION,
    VARIANT_EFFECT.MISSENSE_VARIANT,
]:
    EFFECT_IMPACT[_effect] = IMPACT.MODERATE
for _effect in [
    VARIANT_EFFECT.SPLICE_REGION_VARIANT,
    VARIANT_EFFECT.STOP_RETAINED_VARIANT,
    VARIANT_EFFECT.SYNONYMOUS_VARIANT,
]:
    EFFECT_IMPACT[_effect] = IMPACT.LOW
del _effect


PROTEIN_NO_CHANGE: str = 'p.='
"""str: protein description when the change does not alter the protein sequence"""

PROTEIN_NOT_PRODUCED: str = 'p.0?'
"""str: protein description when it is unknown if any protein is produced"""


class SEX(VarnomenNamespace):
    MALE: str = 'male'
    FEMALE: str = 'female'
    UNKNOWN: str = 'unknown'


class DISEASE(VarnomenNamespace):
    AFFECTED: str = 'affected'
    UNAFFECTED: str = 'unaffected'
    UNKNOWN: str = 'unknown'


class GENOTYPE(VarnomenNamespace):
    HOMOZYGOUS_REF: str = '0/0'
    HETEROZYGOUS: str = '0/1'
    HOMOZYGOUS_ALT: str = '1/1'
    NOT_OBSERVED: str = './.'


class COLUMNS(VarnomenNamespace):
    """
    column names for the tab-delimited input and output files
    """

    chr: str = 'chr'
    pos: str = 'pos'
    ref: str = 'ref'
    alt: str = 'alt'
    transcript: str = 'transcript'
    gene: str = 'gene'
    effects: str = 'effects'
    impact: str = 'impact'
    location: str = 'location'
    nucleotide_hgvs: str = 'nucleotide_hgvs'
    protein_hgvs: str = 'protein_hgvs'
    annotation_id: str = 'annotation_id'
    error: str = 'error'


def sort_columns(input_columns):
    """
    put the known columns first, in their defined order, followed by any custom columns sorted by name
    """
    order = {col: i for i, col in enumerate(COLUMNS.values())}
    return sorted(
        list(input_columns), key=lambda x: (order.get(x, len(order)), x)
    )


class SUBCOMMAND(VarnomenNamespace):
    """
    commands available from the command line interface
    """

    ANNOTATE: str = 'annotate'
    PEDIGREE: str = 'pedigree'
