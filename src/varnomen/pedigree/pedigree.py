"""
family structures read from PED files
"""
from typing import Dict, Iterable, List, Optional

import pandas as pd

from ..constants import DISEASE, SEX
from ..error import PedigreeError
from ..util import logger

PED_COLUMNS = ['family', 'name', 'father', 'mother', 'sex', 'disease']
PED_UNKNOWN_PARENT = '0'
SINGLE_SAMPLE_FAMILY = 'FAMILY'


def sex_from_ped_code(code) -> str:
    """
    Example:
        >>> sex_from_ped_code('2')
        'female'
    """
    return {'1': SEX.MALE, '2': SEX.FEMALE}.get(str(code).strip(), SEX.UNKNOWN)


def disease_from_ped_code(code) -> str:
    return {'2': DISEASE.AFFECTED, '1': DISEASE.UNAFFECTED}.get(str(code).strip(), DISEASE.UNKNOWN)


class Person:
    """
    a member of a pedigree. Parents are other Person objects of the same pedigree (or None if unknown)
    """

    def __init__(
        self,
        name: str,
        family: str = SINGLE_SAMPLE_FAMILY,
        father: Optional['Person'] = None,
        mother: Optional['Person'] = None,
        sex: str = SEX.UNKNOWN,
        disease: str = DISEASE.UNKNOWN,
    ):
        self.name = name
        self.family = family
        self.father = father
        self.mother = mother
        self.sex = SEX.enforce(sex)
        self.disease = DISEASE.enforce(disease)

    def is_male(self) -> bool:
        return self.sex == SEX.MALE

    def is_female(self) -> bool:
        return self.sex == SEX.FEMALE

    def is_affected(self) -> bool:
        return self.disease == DISEASE.AFFECTED

    def is_unaffected(self) -> bool:
        return self.disease == DISEASE.UNAFFECTED

    def is_founder(self) -> bool:
        return self.father is None and self.mother is None

    def __repr__(self):
        return 'Person({}:{}, {}, {})'.format(self.family, self.name, self.sex, self.disease)


class Pedigree:
    """
    the members of a single family, in a fixed order

    Raises:
        PedigreeError: member names are not unique or a parent is not a member
    """

    def __init__(self, name: str, members: Iterable[Person]):
        self.name = name
        self.members: List[Person] = list(members)
        self._by_name: Dict[str, Person] = {}
        for member in self.members:
            if member.name in self._by_name:
                raise PedigreeError('duplicate member name', name, member.name)
            self._by_name[member.name] = member
        for member in self.members:
            for parent in [member.father, member.mother]:
                if parent is not None and self._by_name.get(parent.name) is not parent:
                    raise PedigreeError('parent is not a member of the pedigree', name, parent.name)

    @classmethod
    def single_sample(cls, name: str) -> 'Pedigree':
        """a family consisting of one affected individual of unknown sex"""
        return cls(
            SINGLE_SAMPLE_FAMILY,
            [Person(name, SINGLE_SAMPLE_FAMILY, sex=SEX.UNKNOWN, disease=DISEASE.AFFECTED)],
        )

    @classmethod
    def from_records(cls, name: str, records: List[Dict]) -> 'Pedigree':
        """
        build a pedigree from PED rows, parents are given by name ('0' when unknown)
        """
        members = {}
        for record in records:
            members[record['name']] = Person(
                record['name'],
                name,
                sex=sex_from_ped_code(record['sex']),
                disease=disease_from_ped_code(record['disease']),
            )
        if len(members) != len(records):
            raise PedigreeError('duplicate member name', name)
        for record in records:
            person = members[record['name']]
            for attr in ['father', 'mother']:
                parent_name = record[attr]
                if parent_name is None or parent_name == PED_UNKNOWN_PARENT:
                    continue
                if parent_name not in members:
                    raise PedigreeError('unknown parent', name, record['name'], parent_name)
                setattr(person, attr, members[parent_name])
        return cls(name, [members[r['name']] for r in records])

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def names(self) -> List[str]:
        return [m.name for m in self.members]

    def has_member(self, name: str) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Person:
        try:
            return self._by_name[name]
        except KeyError:
            raise PedigreeError('no such member', self.name, name)

    def reordered(self, names: List[str]) -> 'Pedigree':
        """
        the same pedigree with the members in the given order
        """
        if sorted(names) != sorted(self.names):
            raise PedigreeError('names do not match the members of the pedigree', self.name, names)
        return Pedigree(self.name, [self._by_name[n] for n in names])

    def summary(self) -> str:
        """
        Example:
            >>> Pedigree.single_sample('NAME').summary()
            'FAMILY:NAME[affected;unknown]'
        """
        return ','.join(
            ['{}:{}[{};{}]'.format(self.name, m.name, m.disease, m.sex) for m in self.members]
        )

    def __len__(self):
        return self.size

    def __iter__(self):
        return iter(self.members)


class PedigreeQuery:
    """
    questions about the relationships of the members of a pedigree
    """

    def __init__(self, pedigree: Pedigree):
        self.pedigree = pedigree

    def is_parent_of_affected(self, person: Person) -> bool:
        for member in self.pedigree:
            if member.is_affected() and person in [member.father, member.mother]:
                return True
        return False

    @property
    def unaffected_names(self) -> List[str]:
        return [m.name for m in self.pedigree if m.is_unaffected()]

    @property
    def parents(self) -> List[Person]:
        """members which are the father or mother of another member"""
        parents = []
        for member in self.pedigree:
            for parent in [member.father, member.mother]:
                if parent is not None and parent not in parents:
                    parents.append(parent)
        return parents

    @property
    def parent_names(self) -> List[str]:
        return [p.name for p in self.parents]

    def _parents_of(self, children: List[Person]) -> List[str]:
        names = []
        for child in children:
            for parent in [child.father, child.mother]:
                if parent is not None and parent.name not in names:
                    names.append(parent.name)
        return names

    @property
    def affected_male_parent_names(self) -> List[str]:
        """the fathers and mothers of the affected male members"""
        return self._parents_of([m for m in self.pedigree if m.is_affected() and m.is_male()])

    @property
    def affected_female_parent_names(self) -> List[str]:
        """the fathers and mothers of the affected female members"""
        return self._parents_of([m for m in self.pedigree if m.is_affected() and m.is_female()])

    @property
    def number_of_parents(self) -> int:
        return len(self.parents)

    @property
    def number_of_affecteds(self) -> int:
        return len([m for m in self.pedigree if m.is_affected()])

    @property
    def number_of_unaffecteds(self) -> int:
        """unaffected members, not counting the parents of affected members"""
        return len(
            [m for m in self.pedigree if m.is_unaffected() and not self.is_parent_of_affected(m)]
        )


def parse_ped_file(filename: str) -> Dict[str, Pedigree]:
    """
    reads a PED file: whitespace delimited, no header, with the columns family, name, father,
    mother, sex and disease status

    Returns:
        the pedigrees keyed by family name
    """
    try:
        df = pd.read_csv(
            filename,
            sep=r'\s+',
            header=None,
            comment='#',
            dtype=str,
            keep_default_na=False,
        )
    except pd.errors.EmptyDataError:
        return {}
    if df.shape[1] < len(PED_COLUMNS):
        raise PedigreeError(f'PED files require {len(PED_COLUMNS)} columns', filename, df.shape[1])
    df = df.iloc[:, :len(PED_COLUMNS)]
    df.columns = PED_COLUMNS

    pedigrees = {}
    for family, group in df.groupby('family', sort=False):
        pedigrees[family] = Pedigree.from_records(family, group.to_dict('records'))
    logger.info(f'loaded {len(pedigrees)} pedigrees ({len(df)} individuals) from {filename}')
    return pedigrees
