"""
annotation of changes which overlap the coding exons of a transcript

The shared stages (translation, frame delta, CDS projection of the change, amino acid windows)
are computed once into an ExonicChange which the per-shape algorithms then classify and format
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..constants import (
    CODON_SIZE,
    PROTEIN_NO_CHANGE,
    PROTEIN_NOT_PRODUCED,
    STOP_AA,
    VARIANT_EFFECT,
    VARIANT_SHAPE,
    to_long_name,
    translate,
)
from ..reference.constants import SPLICE_SITE_TYPE
from ..reference.position import GenomeInterval
from ..reference.projection import CDSPosition, TranscriptProjector
from ..reference.regions import TranscriptRegions
from ..reference.transcript import genome_position
from ..reference.variant import GenomeVariant
from .protein import (
    AminoAcidChange,
    format_extension,
    format_frameshift,
    format_protein_change,
    residue,
)

SPLICE_EFFECTS = {
    SPLICE_SITE_TYPE.DONOR: VARIANT_EFFECT.SPLICE_DONOR_VARIANT,
    SPLICE_SITE_TYPE.ACCEPTOR: VARIANT_EFFECT.SPLICE_ACCEPTOR_VARIANT,
    SPLICE_SITE_TYPE.REGION: VARIANT_EFFECT.SPLICE_REGION_VARIANT,
}


def classification_interval(variant: GenomeVariant) -> GenomeInterval:
    """
    the interval used to decide which regions a change overlaps. Insertions are represented by
    the base following the insertion point
    """
    if variant.ref:
        return variant.interval
    return GenomeInterval.from_position(variant.pos, 1)


@dataclass(frozen=True)
class ExonicChange:
    """
    the intermediate results shared by the exonic algorithms

    Attributes:
        variant: the change on the strand of the transcript
        wt_aa: translation of the wild-type transcript from the start of the CDS
        var_aa: translation of the variant transcript from the start of the CDS
        frame_delta: change in length of the CDS modulo the codon size
        ref_begin: CDS position of the first changed base
        ref_last: CDS position of the last changed reference base
        var_last: CDS position of the last alternate base
        aa_change: the affected wild-type and variant amino acid windows (not normalized)
        var_stop_pos: index of the first stop at/after the change in the variant protein (-1 if none)
        splice_type: the splice window overlapped by the change, if any
        overlaps_stop: the change alters the stop codon
    """

    variant: GenomeVariant
    wt_aa: str
    var_aa: str
    frame_delta: int
    ref_begin: CDSPosition
    ref_last: CDSPosition
    var_last: CDSPosition
    aa_change: AminoAcidChange
    var_stop_pos: int
    splice_type: Optional[str]
    overlaps_stop: bool

    @property
    def is_frameshift(self) -> bool:
        return self.frame_delta != 0

    @property
    def aa_pos(self) -> int:
        return self.ref_begin.aa_pos

    def splice_effects(self) -> List[str]:
        if self.splice_type is None:
            return []
        return [SPLICE_EFFECTS[self.splice_type]]


def _cds_window(
    projector: TranscriptProjector, variant: GenomeVariant, shape: str
) -> Tuple[CDSPosition, CDSPosition, CDSPosition]:
    transcript = projector.transcript

    def project(pos: int) -> CDSPosition:
        return projector.project_genome_to_cds_position(genome_position(transcript, pos))

    begin = variant.pos.pos
    ref_begin = project(begin)
    if shape == VARIANT_SHAPE.INSERTION:
        return ref_begin, ref_begin.shifted(-1), ref_begin.shifted(len(variant.alt) - 1)

    last = project(begin + len(variant.ref) - 1)
    ref_last = last.shifted(-1) if last.in_intron or last.outside_cds else last
    if shape == VARIANT_SHAPE.SNV:
        return ref_begin, ref_last, ref_begin
    elif shape == VARIANT_SHAPE.DELETION:
        return ref_begin, ref_last, ref_begin.shifted(-1)
    var_last = project(begin + len(variant.alt) - 1)
    if last.outside_cds:
        var_last = var_last.shifted(-1)
    return ref_begin, ref_last, var_last


def build_exonic_change(
    projector: TranscriptProjector, regions: TranscriptRegions, variant: GenomeVariant, shape: str
) -> ExonicChange:
    """
    compute the shared stages of the exonic algorithms for a change overlapping a coding exon
    """
    transcript = projector.transcript
    variant = variant.with_strand(transcript.strand)
    wt_cds = projector.transcript_starting_at_cds()
    var_cds = projector.apply_variant_to_cds(variant)
    wt_aa = translate(wt_cds)
    var_aa = translate(var_cds)
    frame_delta = (len(var_cds) - len(wt_cds)) % CODON_SIZE

    ref_begin, ref_last, var_last = _cds_window(projector, variant, shape)
    aa_pos = ref_begin.aa_pos
    aa_change = AminoAcidChange(
        aa_pos,
        wt_aa[aa_pos:(ref_last.pos + CODON_SIZE) // CODON_SIZE],
        var_aa[aa_pos:(var_last.pos + CODON_SIZE) // CODON_SIZE],
    )
    interval = classification_interval(variant)
    if shape == VARIANT_SHAPE.INSERTION:
        # inserting next to the stop codon leaves it intact
        stop = transcript.stop_codon_interval()
        overlaps_stop = stop.begin < variant.pos.pos < stop.end
    else:
        overlaps_stop = regions.overlaps_translational_stop(interval)
    return ExonicChange(
        variant=variant,
        wt_aa=wt_aa,
        var_aa=var_aa,
        frame_delta=frame_delta,
        ref_begin=ref_begin,
        ref_last=ref_last,
        var_last=var_last,
        aa_change=aa_change,
        var_stop_pos=var_aa.find(STOP_AA, aa_pos),
        splice_type=regions.splice_site_type(interval),
        overlaps_stop=overlaps_stop,
    )


def annotate_snv(change: ExonicChange) -> Tuple[List[str], str]:
    effects = change.splice_effects()
    pos = change.aa_pos
    wt_res = residue(change.wt_aa, pos)
    var_res = residue(change.var_aa, pos)
    if wt_res == var_res:
        effects.append(
            VARIANT_EFFECT.STOP_RETAINED_VARIANT if wt_res == STOP_AA else VARIANT_EFFECT.SYNONYMOUS_VARIANT
        )
        return effects, PROTEIN_NO_CHANGE
    if wt_res == STOP_AA:
        effects.append(VARIANT_EFFECT.STOP_LOST)
        protein = 'p.{}{}{}{}'.format(
            STOP_AA,
            pos + 1,
            to_long_name(var_res),
            format_extension(AminoAcidChange(pos, wt_res, var_res), change.var_stop_pos),
        )
        return effects, protein
    if var_res == STOP_AA:
        effects.append(VARIANT_EFFECT.STOP_GAINED)
    else:
        effects.append(VARIANT_EFFECT.MISSENSE_VARIANT)
    return effects, 'p.{}{}{}'.format(to_long_name(wt_res), pos + 1, to_long_name(var_res))


def _annotate_block_substitution_inframe(
    change: ExonicChange, effects: List[str]
) -> Tuple[List[str], str]:
    aa_change = change.aa_change
    ref, alt = change.variant.ref, change.variant.alt
    if change.overlaps_stop:
        effects.append(VARIANT_EFFECT.STOP_LOST)
    elif len(alt) > len(ref):
        effects.append(VARIANT_EFFECT.INTERNAL_FEATURE_ELONGATION)
    elif len(alt) < len(ref):
        effects.extend([VARIANT_EFFECT.FEATURE_TRUNCATION, VARIANT_EFFECT.COMPLEX_SUBSTITUTION])
    else:
        effects.append(VARIANT_EFFECT.MNV)

    aa_change = aa_change.normalized()
    if aa_change.alt == STOP_AA:
        effects.append(VARIANT_EFFECT.STOP_GAINED)
    if aa_change.is_nop():
        if VARIANT_EFFECT.STOP_LOST in effects:
            effects.remove(VARIANT_EFFECT.STOP_LOST)
            effects.append(VARIANT_EFFECT.STOP_RETAINED_VARIANT)
        return effects, PROTEIN_NO_CHANGE

    protein = format_protein_change(aa_change, change.wt_aa)
    if change.overlaps_stop:
        protein += format_extension(aa_change, change.var_stop_pos)
    if VARIANT_EFFECT.MNV not in effects:
        effects.append(VARIANT_EFFECT.COMPLEX_SUBSTITUTION)
    return effects, protein


def _annotate_block_substitution_frameshift(
    change: ExonicChange, effects: List[str]
) -> Tuple[List[str], str]:
    if change.overlaps_stop:
        effects.append(VARIANT_EFFECT.STOP_LOST)
    aa_change = change.aa_change
    if change.var_stop_pos >= 0:
        protein = format_frameshift(
            aa_change.pos,
            change.wt_aa,
            change.var_aa,
            change.var_stop_pos,
            extension=STOP_AA in aa_change.ref,
        )
        effects.append(VARIANT_EFFECT.FRAMESHIFT_VARIANT)
    else:
        protein = PROTEIN_NOT_PRODUCED
        effects.extend([VARIANT_EFFECT.FRAMESHIFT_VARIANT, VARIANT_EFFECT.STOP_LOST])
    effects.append(VARIANT_EFFECT.COMPLEX_SUBSTITUTION)
    return effects, protein


def annotate_block_substitution(change: ExonicChange) -> Tuple[List[str], str]:
    effects = change.splice_effects()
    if change.is_frameshift:
        return _annotate_block_substitution_frameshift(change, effects)
    return _annotate_block_substitution_inframe(change, effects)


def _annotate_indel_frameshift(
    change: ExonicChange, effects: List[str], effect: str
) -> Tuple[List[str], str]:
    wt_aa, var_aa = change.wt_aa, change.var_aa
    pos = change.aa_pos
    while pos < len(wt_aa) and pos < len(var_aa) and wt_aa[pos] == var_aa[pos]:
        pos += 1
    if change.overlaps_stop:
        effects.append(VARIANT_EFFECT.STOP_LOST)
    var_res = residue(var_aa, pos)
    if var_res == STOP_AA:
        effects.append(VARIANT_EFFECT.STOP_GAINED)
        return effects, 'p.{}{}{}'.format(to_long_name(residue(wt_aa, pos)), pos + 1, STOP_AA)
    effects.append(effect)
    stop_pos = var_aa.find(STOP_AA, pos)
    if stop_pos < 0:
        return effects, PROTEIN_NOT_PRODUCED
    return effects, format_frameshift(pos, wt_aa, var_aa, stop_pos, extension=residue(wt_aa, pos) == STOP_AA)


def _annotate_indel_inframe(
    change: ExonicChange, effects: List[str], aligned: bool, shape: str
) -> Tuple[List[str], str]:
    aa_change = change.aa_change.normalized()
    if shape == VARIANT_SHAPE.DELETION:
        effects.append(
            VARIANT_EFFECT.INFRAME_DELETION
            if aligned and not aa_change.alt
            else VARIANT_EFFECT.DISRUPTIVE_INFRAME_DELETION
        )
    else:
        effects.append(
            VARIANT_EFFECT.INFRAME_INSERTION
            if aligned and not aa_change.ref
            else VARIANT_EFFECT.DISRUPTIVE_INFRAME_INSERTION
        )
    if change.overlaps_stop:
        effects.append(VARIANT_EFFECT.STOP_LOST)
    elif aa_change.alt.endswith(STOP_AA):
        effects.append(VARIANT_EFFECT.STOP_GAINED)
    if aa_change.is_nop():
        return effects, PROTEIN_NO_CHANGE
    protein = format_protein_change(aa_change, change.wt_aa)
    if change.overlaps_stop:
        protein += format_extension(aa_change, change.var_stop_pos)
    return effects, protein


def annotate_deletion(change: ExonicChange) -> Tuple[List[str], str]:
    effects = change.splice_effects()
    if change.is_frameshift:
        return _annotate_indel_frameshift(change, effects, VARIANT_EFFECT.FRAMESHIFT_TRUNCATION)
    aligned = change.ref_begin.frameshift == 0
    return _annotate_indel_inframe(change, effects, aligned, VARIANT_SHAPE.DELETION)


def annotate_insertion(change: ExonicChange) -> Tuple[List[str], str]:
    effects = change.splice_effects()
    if change.is_frameshift:
        return _annotate_indel_frameshift(change, effects, VARIANT_EFFECT.FRAMESHIFT_ELONGATION)
    aligned = change.ref_begin.frameshift == 0
    return _annotate_indel_inframe(change, effects, aligned, VARIANT_SHAPE.INSERTION)


EXONIC_ALGORITHMS = {
    VARIANT_SHAPE.SNV: annotate_snv,
    VARIANT_SHAPE.INSERTION: annotate_insertion,
    VARIANT_SHAPE.DELETION: annotate_deletion,
    VARIANT_SHAPE.BLOCK_SUBSTITUTION: annotate_block_substitution,
}
