"""
builders which turn a (transcript, variant) pair into an Annotation

Each variant shape has one builder. Except for structural variants, the builders locate the change
with an ordered list of (rule, annotator) pairs where the first matching rule decides how the change
is annotated
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import AnnotationOptions
from ..constants import (
    INVALID_RANK,
    PROTEIN_NOT_PRODUCED,
    RANK_TYPE,
    VARIANT_EFFECT,
    VARIANT_SHAPE,
)
from ..error import InvalidGenomeChange
from ..reference.constants import SPLICE_SITE_TYPE
from ..reference.position import GenomeInterval
from ..reference.projection import TranscriptProjector
from ..reference.regions import TranscriptRegions
from ..reference.transcript import TranscriptModel
from ..reference.variant import GenomeVariant
from .annotation import Annotation, AnnotationLocation
from .exonic import EXONIC_ALGORITHMS, SPLICE_EFFECTS, build_exonic_change, classification_interval
from .hgvs import genomic_description, transcript_description


@dataclass(frozen=True)
class BuildContext:
    """
    everything an annotator needs to know about a (transcript, variant) pair

    Attributes:
        transcript: the transcript (None for intergenic variants)
        variant: the change as given to the builder
        shape: the VARIANT_SHAPE of the change
        options: the annotation settings
        projector: coordinate projection for the transcript
        regions: functional regions of the transcript
        interval: the classification interval of the change on the strand of the transcript
    """

    transcript: Optional[TranscriptModel]
    variant: GenomeVariant
    shape: str
    options: AnnotationOptions
    projector: Optional[TranscriptProjector] = None
    regions: Optional[TranscriptRegions] = None
    interval: Optional[GenomeInterval] = None

    @classmethod
    def create(
        cls,
        transcript: Optional[TranscriptModel],
        variant: GenomeVariant,
        shape: str,
        options: Optional[AnnotationOptions] = None,
    ) -> 'BuildContext':
        options = options or AnnotationOptions()
        if transcript is None:
            return cls(transcript, variant, shape, options)
        if variant.chr != transcript.chr:
            raise InvalidGenomeChange(
                'variant is not on the same contig as the transcript', str(variant), transcript.accession
            )
        tx_variant = variant.with_strand(transcript.strand)
        interval = classification_interval(tx_variant)
        if (
            not tx_variant.ref
            and transcript.is_coding()
            and tx_variant.pos.pos == transcript.cds_region.begin
        ):
            # insertion directly before the start codon
            interval = interval.shifted(-1)
        return cls(
            transcript,
            variant,
            shape,
            options,
            projector=TranscriptProjector(transcript),
            regions=TranscriptRegions(transcript, **options.region_settings()),
            interval=interval,
        )

    def location(self) -> Optional[AnnotationLocation]:
        located = self.projector.locate(self.interval)
        if located is None:
            return None
        return AnnotationLocation(*located)

    def nucleotide_hgvs(self) -> str:
        return transcript_description(self.projector, self.variant)

    def annotation(self, effects: List[str], protein_hgvs: Optional[str] = None) -> Annotation:
        return Annotation(
            self.transcript,
            self.variant,
            tuple(effects),
            self.location(),
            self.nucleotide_hgvs(),
            protein_hgvs,
        )


def _annotate_intergenic(ctx: BuildContext) -> Annotation:
    return Annotation(
        ctx.transcript,
        ctx.variant,
        (VARIANT_EFFECT.INTERGENIC_VARIANT,),
        None,
        genomic_description(ctx.variant),
    )


def _annotate_non_coding(ctx: BuildContext) -> Annotation:
    regions = ctx.regions
    effects = []
    splice_type = regions.splice_site_type(ctx.interval)
    if splice_type is not None:
        effects.append(SPLICE_EFFECTS[splice_type])
    if regions.overlaps_exon(ctx.interval):
        effects.append(VARIANT_EFFECT.NON_CODING_TRANSCRIPT_EXON_VARIANT)
    else:
        effects.append(VARIANT_EFFECT.NON_CODING_TRANSCRIPT_INTRON_VARIANT)
    return ctx.annotation(effects)


def _annotate_transcript_ablation(ctx: BuildContext) -> Annotation:
    return ctx.annotation([VARIANT_EFFECT.TRANSCRIPT_ABLATION])


def _annotate_start_loss(ctx: BuildContext) -> Annotation:
    return ctx.annotation([VARIANT_EFFECT.START_LOST], PROTEIN_NOT_PRODUCED)


def _annotate_cds_exon(ctx: BuildContext) -> Annotation:
    change = build_exonic_change(ctx.projector, ctx.regions, ctx.variant, ctx.shape)
    effects, protein = EXONIC_ALGORITHMS[ctx.shape](change)
    return ctx.annotation(effects, protein)


def _annotate_cds_intron(ctx: BuildContext) -> Annotation:
    splice_type = ctx.regions.splice_site_type(ctx.interval)
    if splice_type in {SPLICE_SITE_TYPE.DONOR, SPLICE_SITE_TYPE.ACCEPTOR}:
        effects = [SPLICE_EFFECTS[splice_type]]
    elif splice_type == SPLICE_SITE_TYPE.REGION:
        effects = [VARIANT_EFFECT.SPLICE_REGION_VARIANT, VARIANT_EFFECT.CODING_TRANSCRIPT_INTRON_VARIANT]
    else:
        effects = [VARIANT_EFFECT.CODING_TRANSCRIPT_INTRON_VARIANT]
    return ctx.annotation(effects)


def _annotate_utr(ctx: BuildContext) -> Annotation:
    regions = ctx.regions
    exonic = regions.overlaps_exon(ctx.interval)
    if regions.overlaps_five_prime_utr(ctx.interval):
        effect = (
            VARIANT_EFFECT.FIVE_PRIME_UTR_EXON_VARIANT
            if exonic
            else VARIANT_EFFECT.FIVE_PRIME_UTR_INTRON_VARIANT
        )
    else:
        effect = (
            VARIANT_EFFECT.THREE_PRIME_UTR_EXON_VARIANT
            if exonic
            else VARIANT_EFFECT.THREE_PRIME_UTR_INTRON_VARIANT
        )
    effects = [effect]
    splice_type = regions.splice_site_type(ctx.interval)
    if splice_type is not None:
        effects.append(SPLICE_EFFECTS[splice_type])
    return ctx.annotation(effects)


def _annotate_flank(ctx: BuildContext) -> Annotation:
    if ctx.regions.overlaps_upstream_region(ctx.interval):
        effect = VARIANT_EFFECT.UPSTREAM_GENE_VARIANT
    else:
        effect = VARIANT_EFFECT.DOWNSTREAM_GENE_VARIANT
    return ctx.annotation([effect])


ANNOTATION_RULES: List[Tuple[Callable[[BuildContext], bool], Callable[[BuildContext], Annotation]]] = [
    (lambda ctx: ctx.transcript is None, _annotate_intergenic),
    (
        lambda ctx: not ctx.transcript.is_coding() and ctx.transcript.tx_region.overlaps(ctx.interval),
        _annotate_non_coding,
    ),
    (lambda ctx: ctx.regions.contains_exon(ctx.interval), _annotate_transcript_ablation),
    (lambda ctx: ctx.regions.overlaps_translational_start(ctx.interval), _annotate_start_loss),
    (
        lambda ctx: ctx.regions.overlaps_cds_exon(ctx.interval) and ctx.regions.overlaps_cds(ctx.interval),
        _annotate_cds_exon,
    ),
    (
        lambda ctx: ctx.regions.overlaps_cds_intron(ctx.interval) and ctx.regions.overlaps_cds(ctx.interval),
        _annotate_cds_intron,
    ),
    (
        lambda ctx: ctx.regions.overlaps_five_prime_utr(ctx.interval)
        or ctx.regions.overlaps_three_prime_utr(ctx.interval),
        _annotate_utr,
    ),
    (
        lambda ctx: ctx.regions.overlaps_upstream_region(ctx.interval)
        or ctx.regions.overlaps_downstream_region(ctx.interval),
        _annotate_flank,
    ),
]


def _build(ctx: BuildContext) -> Annotation:
    for rule, annotator in ANNOTATION_RULES:
        if rule(ctx):
            return annotator(ctx)
    return _annotate_intergenic(ctx)


def build_snv_annotation(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    Raises:
        InvalidGenomeChange: the change is not a single base substitution
    """
    if len(variant.ref) != 1 or len(variant.alt) != 1:
        raise InvalidGenomeChange('expected a single base substitution', str(variant))
    return _build(BuildContext.create(transcript, variant, VARIANT_SHAPE.SNV, options))


def build_insertion_annotation(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    Raises:
        InvalidGenomeChange: the change has a reference allele
    """
    if variant.ref:
        raise InvalidGenomeChange('expected an insertion (empty reference allele)', str(variant))
    return _build(BuildContext.create(transcript, variant, VARIANT_SHAPE.INSERTION, options))


def build_deletion_annotation(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    Raises:
        InvalidGenomeChange: the change has an alternate allele
    """
    if variant.alt:
        raise InvalidGenomeChange('expected a deletion (empty alternate allele)', str(variant))
    return _build(BuildContext.create(transcript, variant, VARIANT_SHAPE.DELETION, options))


def build_block_substitution_annotation(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    annotate the replacement of one or more reference bases by one or more alternate bases

    Raises:
        InvalidGenomeChange: either allele is empty
    """
    if not variant.ref or not variant.alt:
        raise InvalidGenomeChange('block substitutions require non-empty ref and alt alleles', str(variant))
    return _build(BuildContext.create(transcript, variant, VARIANT_SHAPE.BLOCK_SUBSTITUTION, options))


def build_structural_variant_annotation(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    annotate large changes. Only the genomic description is given, the effect on the transcript
    (if any) is not resolved
    """
    options = options or AnnotationOptions()
    if transcript is not None and variant.chr != transcript.chr:
        raise InvalidGenomeChange(
            'variant is not on the same contig as the transcript', str(variant), transcript.accession
        )
    location = None
    if transcript is not None:
        location = AnnotationLocation(RANK_TYPE.UNDEFINED, INVALID_RANK, INVALID_RANK)
    return Annotation(
        transcript,
        variant,
        (VARIANT_EFFECT.STRUCTURAL_VARIANT,),
        location,
        genomic_description(variant, options.sv_max_displayed_sequence_length),
    )


BUILDERS = {
    VARIANT_SHAPE.SNV: build_snv_annotation,
    VARIANT_SHAPE.INSERTION: build_insertion_annotation,
    VARIANT_SHAPE.DELETION: build_deletion_annotation,
    VARIANT_SHAPE.BLOCK_SUBSTITUTION: build_block_substitution_annotation,
    VARIANT_SHAPE.STRUCTURAL: build_structural_variant_annotation,
}


def annotate(
    transcript: Optional[TranscriptModel],
    variant: GenomeVariant,
    options: Optional[AnnotationOptions] = None,
) -> Annotation:
    """
    trim the variant to its minimal representation and annotate it with the builder for its shape

    Args:
        transcript: the transcript to annotate against or None for intergenic variants
        variant: the genomic change
        options: the annotation settings
    """
    options = options or AnnotationOptions()
    variant = variant.trimmed()
    shape = variant.shape(options.structural_variant_min_length)
    return BUILDERS[shape](transcript, variant, options)
