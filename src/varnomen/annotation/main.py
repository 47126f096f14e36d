import os
import time
from typing import Dict, List, Optional

from shortuuid import uuid

from ..config import AnnotationOptions, validate_config
from ..constants import COLUMNS
from ..error import InvalidGenomeChange, ProjectionError
from ..reference.file_io import ReferenceTranscripts, load_transcripts
from ..reference.position import HG19
from ..reference.transcript import TranscriptModel
from ..reference.variant import GenomeVariant
from ..util import logger, mkdirp, output_tabbed_file, read_inputs, variant_from_row
from .annotation import Annotation
from .builders import annotate


def overlapping_transcripts(
    transcripts: ReferenceTranscripts, variant: GenomeVariant, options: AnnotationOptions
) -> List[TranscriptModel]:
    """
    the transcripts whose region (including the upstream/downstream flanks) overlaps the variant
    """
    result = []
    for transcript in transcripts.on_contig(variant.chr):
        interval = variant.with_strand(transcript.strand).interval
        if not interval.length():
            interval = interval.with_more_padding(0, 1)
        region = transcript.tx_region.with_more_padding(
            options.upstream_length, options.downstream_length
        )
        if region.overlaps(interval):
            result.append(transcript)
    return result


def _error_row(row: Dict, err: Exception) -> Dict:
    return {
        **row,
        COLUMNS.annotation_id: str(uuid()),
        COLUMNS.error: '{}: {}'.format(err.__class__.__name__, err),
    }


def annotate_row(
    row: Dict, transcripts: ReferenceTranscripts, options: AnnotationOptions, pos_type: str
) -> List[Dict]:
    """
    annotate a single input row against every overlapping transcript. Invalid changes are reported
    in the error column instead of being raised
    """
    try:
        variant = variant_from_row(row, transcripts.ref_dict, pos_type)
    except InvalidGenomeChange as err:
        logger.warning(f'skipping invalid variant ({row[COLUMNS.chr]}:{row[COLUMNS.pos]}): {err}')
        return [_error_row(row, err)]

    results = []
    candidates: List[Optional[TranscriptModel]] = overlapping_transcripts(transcripts, variant, options)
    if not candidates:
        candidates = [None]
    for transcript in candidates:
        try:
            ann: Annotation = annotate(transcript, variant, options)
        except (InvalidGenomeChange, ProjectionError) as err:
            accession = transcript.accession if transcript else None
            logger.warning(f'failed to annotate {variant} on {accession}: {err}')
            results.append({**_error_row(row, err), COLUMNS.transcript: accession})
            continue
        results.append(
            {**row, **ann.flatten(), COLUMNS.annotation_id: str(uuid()), COLUMNS.error: None}
        )
    return results


def main(
    inputs: List[str],
    output: str,
    config: Optional[Dict] = None,
    start_time: int = int(time.time()),
) -> str:
    """
    annotate all variants of the input files and write the annotations to a tab-delimited file

    Args:
        inputs: list of input files to read
        output: path to the output file
        config: the settings (see the config schema)

    Returns:
        the path to the output file
    """
    config = validate_config(config)
    options = AnnotationOptions.from_config(config)
    if config['reference.transcripts']:
        transcripts = load_transcripts(*config['reference.transcripts'])
    else:
        logger.warning('no transcripts given, all variants will be annotated as intergenic')
        transcripts = ReferenceTranscripts(HG19)

    rows = read_inputs(inputs)
    results = []
    errors = 0
    for row in rows:
        annotated = annotate_row(row, transcripts, options, config['input.position_type'])
        errors += len([r for r in annotated if r[COLUMNS.error]])
        results.extend(annotated)

    if os.path.dirname(output):
        mkdirp(os.path.dirname(output))
    output_tabbed_file(results, output)
    logger.info(
        f'annotated {len(rows)} variants ({len(results)} annotations, {errors} errors) '
        f'in {int(time.time()) - start_time}s'
    )
    return output
