"""
the annotation record produced for a (transcript, variant) pair
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from ..constants import COLUMNS, INVALID_RANK, RANK_TYPE, VARIANT_EFFECT
from ..reference.transcript import TranscriptModel
from ..reference.variant import GenomeVariant


@dataclass(frozen=True)
class AnnotationLocation:
    """
    the exon or intron a variant lies in

    Attributes:
        rank_type: one of RANK_TYPE
        rank: the one-based rank of the exon/intron in transcript order (INVALID_RANK when not applicable)
        total_rank: the number of exons/introns of the transcript
    """

    rank_type: str
    rank: int = INVALID_RANK
    total_rank: int = INVALID_RANK

    def __post_init__(self):
        RANK_TYPE.enforce(self.rank_type)

    def __str__(self):
        """
        Example:
            >>> str(AnnotationLocation(RANK_TYPE.EXON, 2, 3))
            'exon2/3'
        """
        if self.rank_type == RANK_TYPE.UNDEFINED or self.rank == INVALID_RANK:
            return RANK_TYPE.UNDEFINED
        return '{}{}/{}'.format(self.rank_type, self.rank, self.total_rank)


@dataclass(frozen=True)
class Annotation:
    """
    the consequences of a single variant on a single transcript (or on the genome when no
    transcript is given). Effects are stored ordered from most to least severe
    """

    transcript: Optional[TranscriptModel]
    variant: GenomeVariant
    effects: Tuple[str, ...]
    location: Optional[AnnotationLocation]
    nucleotide_hgvs: str
    protein_hgvs: Optional[str] = None
    data: Dict = field(default_factory=dict, compare=False)

    def __post_init__(self):
        effects = VARIANT_EFFECT.sort(self.effects)
        if not effects:
            raise ValueError('an annotation requires at least one effect')
        object.__setattr__(self, 'effects', tuple(effects))

    @property
    def most_severe_effect(self) -> str:
        return self.effects[0]

    @property
    def impact(self) -> str:
        return VARIANT_EFFECT.impact(self.most_severe_effect)

    def has_effect(self, *effects: str) -> bool:
        return any([e in self.effects for e in effects])

    def flatten(self) -> Dict:
        """
        the row for tabbed output: the extra data columns followed by the annotation columns
        """
        row = dict(self.data)
        row.update(
            {
                COLUMNS.transcript: self.transcript.accession if self.transcript else None,
                COLUMNS.gene: self.transcript.gene_symbol if self.transcript else None,
                COLUMNS.effects: ','.join(self.effects),
                COLUMNS.impact: self.impact,
                COLUMNS.location: str(self.location) if self.location else None,
                COLUMNS.nucleotide_hgvs: self.nucleotide_hgvs,
                COLUMNS.protein_hgvs: self.protein_hgvs,
            }
        )
        return row

    def __str__(self):
        parts = [self.nucleotide_hgvs]
        if self.protein_hgvs:
            parts.append(self.protein_hgvs)
        name = self.transcript.accession if self.transcript else str(self.variant)
        return '{}:{} ({})'.format(name, ':'.join(parts), ','.join(self.effects))


def effects_of(annotations: Iterable[Annotation]) -> Tuple[str, ...]:
    """the union of the effects of several annotations, ordered by severity"""
    effects = set()
    for ann in annotations:
        effects.update(ann.effects)
    return tuple(VARIANT_EFFECT.sort(effects))
