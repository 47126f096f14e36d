class NotSpecifiedError(Exception):
    """
    raised when information is required for a function but has not been given

    for example if a contig length is needed to flip strands but the contig is not in the
    reference dictionary
    """

    pass


class InvalidGenomeChange(Exception):
    """
    raised when a genomic variant is structurally malformed or does not have the shape expected
    by the annotation algorithm it was given to (ex. an empty reference passed to the block
    substitution builder)
    """

    pass


class MalformedTranscriptError(Exception):
    """
    raised when the exon/CDS structure of a transcript model is inconsistent
    """

    pass


class ProjectionError(Exception):
    """
    raised when a position cannot be projected between coordinate systems (ex. an intronic
    position passed to an exon-only projection)
    """

    pass


class PedigreeError(Exception):
    pass
