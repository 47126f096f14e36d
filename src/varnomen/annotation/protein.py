"""
amino acid level changes and their HGVS style protein descriptions
"""
from dataclasses import dataclass

from ..constants import PROTEIN_NO_CHANGE, STOP_AA, to_long_name

UNKNOWN_AA = 'X'


@dataclass(frozen=True)
class AminoAcidChange:
    """
    replacement of the reference residues starting at a zero-based protein position

    Attributes:
        pos: index of the first affected residue
        ref: the reference residues
        alt: the alternate residues
    """

    pos: int
    ref: str
    alt: str

    @property
    def last_pos(self) -> int:
        """index of the last reference residue (pos - 1 for insertions)"""
        return self.pos + len(self.ref) - 1

    def is_nop(self) -> bool:
        return not self.ref and not self.alt

    def shift_right(self) -> 'AminoAcidChange':
        """
        drop the first residue of both ref and alt
        """
        if not self.ref or not self.alt:
            raise ValueError('cannot shift a change with an empty ref or alt', self)
        return AminoAcidChange(self.pos + 1, self.ref[1:], self.alt[1:])

    def truncate_alt_after_stop(self) -> 'AminoAcidChange':
        """
        cut the alt after the first stop symbol, residues following the stop are not translated

        Example:
            >>> AminoAcidChange(3, 'AB', 'C*DE').truncate_alt_after_stop()
            AminoAcidChange(pos=3, ref='AB', alt='C*')
        """
        index = self.alt.find(STOP_AA)
        if index < 0:
            return self
        return AminoAcidChange(self.pos, self.ref, self.alt[:index + 1])

    def normalized(self) -> 'AminoAcidChange':
        """
        the minimal representation: shared leading residues are removed and the alt is truncated
        after the first stop. Applying this to a normalized change does nothing
        """
        change = self
        while change.ref and change.alt and change.ref[0] == change.alt[0]:
            change = change.shift_right()
        return change.truncate_alt_after_stop()


def residue(aa_seq: str, index: int) -> str:
    """the residue at an index, or the unknown residue when out of range"""
    if 0 <= index < len(aa_seq):
        return aa_seq[index]
    return UNKNOWN_AA


def format_protein_change(change: AminoAcidChange, wt_aa: str) -> str:
    """
    format a normalized amino acid change

    Example:
        >>> format_protein_change(AminoAcidChange(1, 'A', 'T'), 'MAR')
        'p.Ala2Thr'
        >>> format_protein_change(AminoAcidChange(1, 'AR', ''), 'MARN')
        'p.Ala2_Arg3del'
        >>> format_protein_change(AminoAcidChange(1, 'AR', 'W'), 'MARN')
        'p.Ala2_Arg3delinsTrp'
    """
    if change.is_nop():
        return PROTEIN_NO_CHANGE
    pos, ref, alt = change.pos, change.ref, change.alt
    if not ref:
        return 'p.{}{}_{}{}ins{}'.format(
            to_long_name(residue(wt_aa, pos - 1)),
            pos,
            to_long_name(residue(wt_aa, pos)),
            pos + 1,
            to_long_name(alt),
        )
    first = to_long_name(ref[0])
    if not alt:
        if len(ref) == 1:
            return 'p.{}{}del'.format(first, pos + 1)
        return 'p.{}{}_{}{}del'.format(first, pos + 1, to_long_name(ref[-1]), change.last_pos + 1)
    if alt == STOP_AA or (len(ref) == 1 and len(alt) == 1):
        return 'p.{}{}{}'.format(first, pos + 1, to_long_name(alt[0]))
    if len(ref) == 1:
        return 'p.{}{}delins{}'.format(first, pos + 1, to_long_name(alt))
    return 'p.{}{}_{}{}delins{}'.format(
        first, pos + 1, to_long_name(ref[-1]), change.last_pos + 1, to_long_name(alt)
    )


def format_extension(change: AminoAcidChange, var_stop_pos: int) -> str:
    """
    suffix for changes to the stop codon: the distance to the new stop, or unknown if none is found
    """
    if var_stop_pos < 0:
        return 'ext*?'
    return 'ext*{}'.format(var_stop_pos - change.pos + 1)


def format_frameshift(
    pos: int, wt_aa: str, var_aa: str, var_stop_pos: int, extension: bool = False
) -> str:
    """
    Example:
        >>> format_frameshift(7, 'MARNDCQEG*', 'MARNDCQLVIF*', 11)
        'p.Glu8Leufs*5'
    """
    return 'p.{}{}{}{}*{}'.format(
        to_long_name(residue(wt_aa, pos)),
        pos + 1,
        to_long_name(residue(var_aa, pos)),
        'ext' if extension else 'fs',
        var_stop_pos - pos + 1,
    )
