"""
nucleotide level HGVS style descriptions of genomic changes
"""
from typing import Optional

from ..constants import STRAND
from ..reference.projection import TranscriptProjector
from ..reference.transcript import genome_position
from ..reference.variant import GenomeVariant


def abbreviate_sequence(seq: str, max_length: Optional[int] = None) -> str:
    """
    shorten long sequences to their first and last two bases

    Example:
        >>> abbreviate_sequence('CGAT', 3)
        'CG..AT'
        >>> abbreviate_sequence('CGA', 3)
        'CGA'
    """
    if max_length is not None and len(seq) > max_length:
        return '{}..{}'.format(seq[:2], seq[-2:])
    return seq


def genomic_description(variant: GenomeVariant, max_seq_length: Optional[int] = None) -> str:
    """
    the description of a change in one-based genomic (g.) coordinates of the forward strand

    Example:
        >>> genomic_description(GenomeVariant(GenomePosition(HG19, '1', 6640062), '', 'CGAT'), 3)
        'g.6640062_6640063insCG..AT'
    """
    variant = variant.with_strand(STRAND.POS)
    begin = variant.pos.pos
    ref, alt = variant.ref, variant.alt
    if not ref:
        return 'g.{}_{}ins{}'.format(begin, begin + 1, abbreviate_sequence(alt, max_seq_length))
    if len(ref) == 1:
        span = str(begin + 1)
    else:
        span = '{}_{}'.format(begin + 1, begin + len(ref))
    if not alt:
        return 'g.{}del'.format(span)
    if len(ref) == 1 and len(alt) == 1:
        return 'g.{}{}>{}'.format(span, ref, alt)
    if variant.is_inversion():
        return 'g.{}inv'.format(span)
    return 'g.{}delins{}'.format(span, abbreviate_sequence(alt, max_seq_length))


def _position(projector: TranscriptProjector, pos: int) -> str:
    return projector.hgvs_position(genome_position(projector.transcript, pos))


def _span(projector: TranscriptProjector, begin: int, end: int) -> str:
    """the one or two position range of the bases [begin, end) on the transcript strand"""
    if end - begin <= 1:
        return _position(projector, begin)
    return '{}_{}'.format(_position(projector, begin), _position(projector, end - 1))


def _duplicated_span(projector: TranscriptProjector, variant: GenomeVariant) -> Optional[str]:
    """
    the span of the bases an insertion duplicates, if the inserted bases repeat the bases just
    upstream of the insertion point within the same exon
    """
    transcript = projector.transcript
    size = len(variant.alt)
    end = variant.pos.pos
    begin = end - size
    first = projector.exon_index(genome_position(transcript, begin))
    if first is None or first != projector.exon_index(genome_position(transcript, end - 1)):
        return None
    offset = projector.genome_to_transcript_pos(genome_position(transcript, begin))
    if transcript.sequence[offset:offset + size] != variant.alt:
        return None
    return _span(projector, begin, end)


def transcript_description(projector: TranscriptProjector, variant: GenomeVariant) -> str:
    """
    the description of a change relative to a transcript (c. for coding and n. for non-coding transcripts)

    Args:
        projector: projector for the transcript
        variant: the change, on any strand
    """
    variant = variant.with_strand(projector.transcript.strand)
    prefix = projector.hgvs_prefix()
    begin = variant.pos.pos
    ref, alt = variant.ref, variant.alt
    if not ref:
        dup = _duplicated_span(projector, variant)
        if dup is not None:
            return '{}{}dup'.format(prefix, dup)
        return '{}{}_{}ins{}'.format(
            prefix, _position(projector, begin - 1), _position(projector, begin), alt
        )
    span = _span(projector, begin, begin + len(ref))
    if not alt:
        return '{}{}del'.format(prefix, span)
    if len(ref) == 1 and len(alt) == 1:
        return '{}{}{}>{}'.format(prefix, span, ref, alt)
    return '{}{}delins{}'.format(prefix, span, alt)
