"""
module which holds all functions relating to loading reference files
"""
import json
import os
from dataclasses import dataclass, field
from typing import Dict, List

from jsonschema import ValidationError

from ..error import MalformedTranscriptError, NotSpecifiedError
from ..schemas import validate
from ..util import logger
from .position import HG19, ReferenceDictionary, ReferenceName
from .transcript import TranscriptModel, build_transcript

TRANSCRIPTS_SCHEMA = os.path.join(os.path.dirname(__file__), 'transcripts_schema.json')


@dataclass
class ReferenceTranscripts:
    """
    the transcript models of a reference genome, grouped by contig
    """

    ref_dict: ReferenceDictionary
    transcripts_by_chr: Dict[str, List[TranscriptModel]] = field(default_factory=dict)

    def add(self, transcript: TranscriptModel):
        self.transcripts_by_chr.setdefault(ReferenceName(transcript.chr), []).append(transcript)

    def __len__(self):
        return sum([len(t) for t in self.transcripts_by_chr.values()])

    def __iter__(self):
        for transcripts in self.transcripts_by_chr.values():
            yield from transcripts

    def get(self, accession: str) -> TranscriptModel:
        for transcript in self:
            if transcript.accession == accession:
                return transcript
        raise KeyError('transcript not found', accession)

    def on_contig(self, chr: str) -> List[TranscriptModel]:
        return self.transcripts_by_chr.get(ReferenceName(chr), [])


def validate_transcripts_json(data: Dict):
    """
    Raises:
        AssertionError: the data does not match the schema
    """
    try:
        validate(data, TRANSCRIPTS_SCHEMA, set_default=True)
    except ValidationError as err:
        short_msg = '. '.join(
            [line for line in str(err).split('\n') if line.strip()][:3]
        )  # these can get super long
        raise AssertionError(short_msg)


def parse_transcripts_json(data: Dict, ref_dict: ReferenceDictionary = HG19) -> ReferenceTranscripts:
    """
    parses a json of transcript information into transcript models. Malformed transcripts are skipped

    Args:
        data: the loaded (and validated) json content
        ref_dict: the reference the transcript coordinates are given relative to
    """
    result = ReferenceTranscripts(ref_dict)
    skipped = 0
    for tx_dict in data['transcripts']:
        cds_start = tx_dict.get('cds_start', tx_dict['tx_start'])
        cds_end = tx_dict.get('cds_end', cds_start)
        try:
            transcript = build_transcript(
                tx_dict['accession'],
                tx_dict['chr'],
                tx_dict['strand'],
                tx_dict['tx_start'],
                tx_dict['tx_end'],
                cds_start,
                cds_end,
                [(exon['start'], exon['end']) for exon in tx_dict['exons']],
                sequence=tx_dict.get('sequence', ''),
                gene_symbol=tx_dict.get('gene_symbol'),
                ref_dict=ref_dict,
            )
        except (MalformedTranscriptError, NotSpecifiedError, AttributeError) as err:
            skipped += 1
            logger.warning(f'skipping transcript ({tx_dict["accession"]}): {err}')
            continue
        if transcript.sequence and len(transcript.sequence) != transcript.transcript_length():
            logger.debug(
                f'sequence length of {transcript.accession} ({len(transcript.sequence)}) does not match '
                f'the exon lengths ({transcript.transcript_length()})'
            )
        result.add(transcript)
    logger.info(f'loaded {len(result)} transcripts, skipped {skipped}')
    return result


def load_transcripts(*filepaths: str) -> ReferenceTranscripts:
    """
    loads transcript models from one or more json files. The contig lengths of all files are combined,
    if no file defines any contigs the hg19 lengths are used

    Returns:
        the transcripts keyed by chromosome name
    """
    contents = []
    contigs: Dict[str, int] = {}
    for filename in filepaths:
        logger.info(f'loading: {filename}')
        with open(filename) as fh:
            data = json.load(fh)
        validate_transcripts_json(data)
        contigs.update(data.get('contigs', {}))
        contents.append(data)

    ref_dict = ReferenceDictionary(contigs) if contigs else HG19
    result = ReferenceTranscripts(ref_dict)
    for data in contents:
        for transcript in parse_transcripts_json(data, ref_dict):
            result.add(transcript)
    return result
