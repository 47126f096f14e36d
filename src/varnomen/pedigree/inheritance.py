"""
checks for whether the genotypes of a family are compatible with a mode of inheritance

Each check takes the pedigree and a list of (variant, genotype call) pairs where the variant is a
GenomeVariant or an Annotation and the call maps member names to GENOTYPE values. Members missing
from a call are treated as not observed
"""
from itertools import combinations
from typing import Dict, List, Tuple, Union

from ..annotation.annotation import Annotation
from ..constants import GENOTYPE
from ..error import PedigreeError
from ..reference.position import ReferenceName
from ..reference.variant import GenomeVariant
from .pedigree import Pedigree, Person, PedigreeQuery

GenotypeCall = Dict[str, str]
CallList = List[Tuple[Union[GenomeVariant, Annotation], GenotypeCall]]

CARRIER = {GENOTYPE.HETEROZYGOUS, GENOTYPE.HOMOZYGOUS_ALT}


def _genotype(call: GenotypeCall, person: Person) -> str:
    return GENOTYPE.enforce(call.get(person.name, GENOTYPE.NOT_OBSERVED))


def _chromosome(item: Union[GenomeVariant, Annotation]) -> ReferenceName:
    if isinstance(item, Annotation):
        return item.variant.chr
    return item.chr


def _single_member(pedigree: Pedigree) -> Person:
    if pedigree.size != 1:
        raise PedigreeError('expected a single sample pedigree', pedigree.name, pedigree.size)
    return pedigree.members[0]


def single_sample_has_heterozygous_variant(pedigree: Pedigree, calls: CallList) -> bool:
    person = _single_member(pedigree)
    return any([_genotype(call, person) == GENOTYPE.HETEROZYGOUS for _, call in calls])


def is_compatible_with_autosomal_dominant(pedigree: Pedigree, calls: CallList) -> bool:
    """
    some variant is heterozygous in every affected member and not carried by any unaffected member
    """
    if pedigree.size == 1:
        return single_sample_has_heterozygous_variant(pedigree, calls)
    for _, call in calls:
        compatible = True
        for member in pedigree:
            genotype = _genotype(call, member)
            if member.is_affected() and genotype != GENOTYPE.HETEROZYGOUS:
                compatible = False
            elif member.is_unaffected() and genotype in CARRIER:
                compatible = False
        if compatible:
            return True
    return False


def _compatible_homozygous(pedigree: Pedigree, query: PedigreeQuery, call: GenotypeCall) -> bool:
    for member in pedigree:
        genotype = _genotype(call, member)
        if member.is_affected() and genotype != GENOTYPE.HOMOZYGOUS_ALT:
            return False
        elif member.is_unaffected() and genotype == GENOTYPE.HOMOZYGOUS_ALT:
            return False
        elif query.is_parent_of_affected(member) and genotype == GENOTYPE.HOMOZYGOUS_REF:
            return False
    return True


def _inherited_from(parent: Person, other: Person, call: GenotypeCall) -> bool:
    """the variant can have been transmitted by parent and not by the other parent"""
    return _genotype(call, parent) in CARRIER and _genotype(call, other) != GENOTYPE.HOMOZYGOUS_ALT


def _compatible_compound_heterozygous(
    pedigree: Pedigree, first: GenotypeCall, second: GenotypeCall
) -> bool:
    for member in pedigree:
        genotypes = (_genotype(first, member), _genotype(second, member))
        if member.is_affected():
            if genotypes != (GENOTYPE.HETEROZYGOUS, GENOTYPE.HETEROZYGOUS):
                return False
            father, mother = member.father, member.mother
            if father is not None and mother is not None:
                if not (
                    (_inherited_from(father, mother, first) and _inherited_from(mother, father, second))
                    or (_inherited_from(father, mother, second) and _inherited_from(mother, father, first))
                ):
                    return False
        elif member.is_unaffected():
            if all([g in CARRIER for g in genotypes]) or GENOTYPE.HOMOZYGOUS_ALT in genotypes:
                return False
    return True


def is_compatible_with_autosomal_recessive(pedigree: Pedigree, calls: CallList) -> bool:
    """
    the affected members are homozygous for some variant or compound heterozygous for two
    """
    if pedigree.size == 1:
        person = _single_member(pedigree)
        genotypes = [_genotype(call, person) for _, call in calls]
        return (
            GENOTYPE.HOMOZYGOUS_ALT in genotypes
            or len([g for g in genotypes if g == GENOTYPE.HETEROZYGOUS]) > 1
        )
    query = PedigreeQuery(pedigree)
    if any([_compatible_homozygous(pedigree, query, call) for _, call in calls]):
        return True
    for (_, first), (_, second) in combinations(calls, 2):
        if _compatible_compound_heterozygous(pedigree, first, second):
            return True
    return False


def is_compatible_with_x_recessive(pedigree: Pedigree, calls: CallList) -> bool:
    """
    some X chromosome variant is homozygous in the affected females, carried by the affected males,
    not homozygous in any unaffected member and carried by the mothers of the affected members
    """
    calls = [(item, call) for item, call in calls if _chromosome(item).is_sex_chromosome_x()]
    if pedigree.size == 1:
        person = _single_member(pedigree)
        for _, call in calls:
            genotype = _genotype(call, person)
            if genotype == GENOTYPE.HOMOZYGOUS_ALT:
                return True
            elif person.is_male() and genotype == GENOTYPE.HETEROZYGOUS:
                return True
        return False

    for _, call in calls:
        compatible = True
        for member in pedigree:
            genotype = _genotype(call, member)
            if member.is_affected():
                if member.is_male() and genotype not in CARRIER:
                    compatible = False
                elif not member.is_male() and genotype != GENOTYPE.HOMOZYGOUS_ALT:
                    compatible = False
                elif member.mother is not None and _genotype(call, member.mother) == GENOTYPE.HOMOZYGOUS_REF:
                    compatible = False
            elif member.is_unaffected() and genotype == GENOTYPE.HOMOZYGOUS_ALT:
                compatible = False
        if compatible:
            return True
    return False
