import pytest
from varnomen.constants import DISEASE, SEX
from varnomen.error import PedigreeError
from varnomen.pedigree.pedigree import (
    Pedigree,
    PedigreeQuery,
    Person,
    disease_from_ped_code,
    parse_ped_file,
    sex_from_ped_code,
)

PED_CONTENT = """\
FAM\tFATHER\t0\t0\t1\t0
FAM\tMOTHER\t0\t0\t2\t1
FAM\tSON\tFATHER\tMOTHER\t1\t1
FAM\tDAUGHTER\tFATHER\tMOTHER\t2\t2
"""


def family_of_four():
    father = Person('FATHER', 'FAM', sex=SEX.MALE, disease=DISEASE.UNKNOWN)
    mother = Person('MOTHER', 'FAM', sex=SEX.FEMALE, disease=DISEASE.UNAFFECTED)
    son = Person('SON', 'FAM', father, mother, SEX.MALE, DISEASE.UNAFFECTED)
    daughter = Person('DAUGHTER', 'FAM', father, mother, SEX.FEMALE, DISEASE.AFFECTED)
    return Pedigree('FAM', [father, mother, son, daughter])


class TestPedCodes:
    def test_sex(self):
        assert sex_from_ped_code('1') == SEX.MALE
        assert sex_from_ped_code(2) == SEX.FEMALE
        assert sex_from_ped_code('0') == SEX.UNKNOWN
        assert sex_from_ped_code('other') == SEX.UNKNOWN

    def test_disease(self):
        assert disease_from_ped_code('2') == DISEASE.AFFECTED
        assert disease_from_ped_code('1') == DISEASE.UNAFFECTED
        assert disease_from_ped_code('-9') == DISEASE.UNKNOWN


class TestPerson:
    def test_flags(self):
        person = Person('NAME', sex=SEX.FEMALE, disease=DISEASE.AFFECTED)
        assert person.is_female()
        assert not person.is_male()
        assert person.is_affected()
        assert not person.is_unaffected()
        assert person.is_founder()
        assert person.family == 'FAMILY'

    def test_bad_sex(self):
        with pytest.raises(KeyError):
            Person('NAME', sex='other')


class TestPedigree:
    def test_single_sample(self):
        pedigree = Pedigree.single_sample('INDIVIDUAL')
        query = PedigreeQuery(pedigree)
        assert pedigree.size == 1
        assert query.number_of_parents == 0
        assert query.number_of_affecteds == 1
        assert query.number_of_unaffecteds == 0
        assert pedigree.summary() == 'FAMILY:INDIVIDUAL[affected;unknown]'

    def test_family_of_four(self):
        pedigree = family_of_four()
        query = PedigreeQuery(pedigree)
        assert pedigree.size == 4
        assert len(pedigree) == 4
        assert query.number_of_parents == 2
        assert query.number_of_affecteds == 1
        # the mother is unaffected but she is a parent of an affected
        assert query.number_of_unaffecteds == 1
        assert query.unaffected_names == ['MOTHER', 'SON']
        assert query.parent_names == ['FATHER', 'MOTHER']

    def test_is_parent_of_affected(self):
        pedigree = family_of_four()
        query = PedigreeQuery(pedigree)
        assert query.is_parent_of_affected(pedigree.get('FATHER'))
        assert query.is_parent_of_affected(pedigree.get('MOTHER'))
        assert not query.is_parent_of_affected(pedigree.get('SON'))
        assert not query.is_parent_of_affected(pedigree.get('DAUGHTER'))

    def test_parents_of_affected_daughter(self):
        query = PedigreeQuery(family_of_four())
        assert query.affected_female_parent_names == ['FATHER', 'MOTHER']
        assert query.affected_male_parent_names == []

    def test_parents_of_affected_son(self):
        father = Person('FATHER', 'FAM', sex=SEX.MALE, disease=DISEASE.UNAFFECTED)
        mother = Person('MOTHER', 'FAM', sex=SEX.FEMALE, disease=DISEASE.AFFECTED)
        son = Person('SON', 'FAM', father, mother, SEX.MALE, DISEASE.AFFECTED)
        brother = Person('BROTHER', 'FAM', father, mother, SEX.MALE, DISEASE.AFFECTED)
        query = PedigreeQuery(Pedigree('FAM', [father, mother, son, brother]))
        # the affected mother is a founder so she has no parents to report
        assert query.affected_male_parent_names == ['FATHER', 'MOTHER']
        assert query.affected_female_parent_names == []

    def test_has_member(self):
        pedigree = family_of_four()
        assert pedigree.has_member('MOTHER')
        assert not pedigree.has_member('Klaus')
        with pytest.raises(PedigreeError):
            pedigree.get('Klaus')

    def test_reordered(self):
        pedigree = family_of_four().reordered(['DAUGHTER', 'SON', 'FATHER', 'MOTHER'])
        assert pedigree.names == ['DAUGHTER', 'SON', 'FATHER', 'MOTHER']
        with pytest.raises(PedigreeError):
            pedigree.reordered(['DAUGHTER', 'SON'])

    def test_summary(self):
        assert family_of_four().summary() == ','.join(
            [
                'FAM:FATHER[unknown;male]',
                'FAM:MOTHER[unaffected;female]',
                'FAM:SON[unaffected;male]',
                'FAM:DAUGHTER[affected;female]',
            ]
        )

    def test_duplicate_name_error(self):
        with pytest.raises(PedigreeError):
            Pedigree('FAM', [Person('A'), Person('A')])

    def test_parent_not_member_error(self):
        father = Person('FATHER', sex=SEX.MALE)
        with pytest.raises(PedigreeError):
            Pedigree('FAM', [Person('CHILD', father=father)])

    def test_from_records_unknown_parent(self):
        with pytest.raises(PedigreeError):
            Pedigree.from_records(
                'FAM',
                [{'name': 'CHILD', 'father': 'NOBODY', 'mother': '0', 'sex': '1', 'disease': '2'}],
            )


class TestParsePedFile:
    def test_family(self, tmp_path):
        filename = tmp_path / 'family.ped'
        filename.write_text(PED_CONTENT)
        pedigrees = parse_ped_file(str(filename))
        assert list(pedigrees) == ['FAM']
        pedigree = pedigrees['FAM']
        assert pedigree.names == ['FATHER', 'MOTHER', 'SON', 'DAUGHTER']
        daughter = pedigree.get('DAUGHTER')
        assert daughter.father is pedigree.get('FATHER')
        assert daughter.mother is pedigree.get('MOTHER')
        assert daughter.is_affected()
        assert pedigree.get('FATHER').disease == DISEASE.UNKNOWN
        assert pedigree.summary() == family_of_four().summary()

    def test_multiple_families(self, tmp_path):
        filename = tmp_path / 'families.ped'
        filename.write_text('# comment\nF1 A 0 0 1 2\nF2 B 0 0 2 1\nF2 C 0 B 1 2\n')
        pedigrees = parse_ped_file(str(filename))
        assert sorted(pedigrees) == ['F1', 'F2']
        assert pedigrees['F2'].get('C').mother is pedigrees['F2'].get('B')

    def test_too_few_columns(self, tmp_path):
        filename = tmp_path / 'bad.ped'
        filename.write_text('F1 A 0 0\n')
        with pytest.raises(PedigreeError):
            parse_ped_file(str(filename))

    def test_empty(self, tmp_path):
        filename = tmp_path / 'empty.ped'
        filename.write_text('')
        assert parse_ped_file(str(filename)) == {}
