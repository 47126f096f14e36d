from ..constants import VarnomenNamespace

SPLICE_SITE_LENGTH: int = 2
"""int: number of intronic bases at either end of an intron making up the donor/acceptor site"""

SPLICE_REGION_EXONIC_LENGTH: int = 3
"""int: number of exonic bases next to an exon boundary considered part of the splice region"""

SPLICE_REGION_INTRONIC_LENGTH: int = 8
"""int: the splice region extends this far into the intron (the splice site itself excluded)"""

FLANK_LENGTH: int = 1000
"""int: default length of the upstream/downstream regions of a transcript"""


class SPLICE_SITE_TYPE(VarnomenNamespace):
    DONOR: str = 'donor'
    ACCEPTOR: str = 'acceptor'
    REGION: str = 'region'
