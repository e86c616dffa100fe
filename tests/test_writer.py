from __future__ import annotations

from pathlib import Path

import pytest

from samlite.models.alignment import Alignment, CigarOp, CigarOpType, OptionalField, OptionalFieldType
from samlite.models.header import Header, Program, ReadGroup, RefSeq, SortOrder
from samlite.models.quality import PhredScore
from samlite.processors.reader import read_file
from samlite.processors.writer import SAMWriter


def build_header() -> Header:
    return Header(
        version='1.6',
        sort_order=SortOrder.COORDINATE,
        ref_seqs=[RefSeq('chr1', 1000), RefSeq('chr2', 500, assembly='test')],
        read_groups=[ReadGroup('rg1', sample='s1')],
        programs=[Program('samlite', name='samlite', version='0.1.0')],
        comments=['written by tests'],
    )


def build_alignment(qname: str = 'read1') -> Alignment:
    return Alignment(
        qname=qname,
        flags=0,
        rname='chr1',
        pos=10,
        mapq=60,
        cigar=[CigarOp(CigarOpType.SOFT_CLIP, 2), CigarOp(CigarOpType.MATCH_ALIGN, 4)],
        seq='NNACGT',
        qual=[PhredScore(2)] * 2 + [PhredScore(30)] * 4,
        optional_fields=[
            OptionalField('NM', OptionalFieldType.INT32, 0),
            OptionalField('RG', OptionalFieldType.STRING, 'rg1'),
        ],
    )


def test_write_then_read(tmp_path: Path):
    path = tmp_path / "out.sam"
    header = build_header()
    alignments = [build_alignment('read1'), build_alignment('read2')]
    with SAMWriter(path) as writer:
        writer.write_header(header)
        writer.write_alignments(alignments)
        assert writer.n_written == 2

    lines = path.read_text().splitlines()
    assert lines[0] == '@HD\tVN:1.6\tSO:coordinate'
    assert lines[-1] == "read2\t0\tchr1\t10\t60\t2S4M\t*\t0\t0\tNNACGT\t##????\tNM:i:0\tRG:Z:rg1"

    read_header, parsed = read_file(path)
    assert read_header == header
    assert [p.unwrap() for p in parsed] == alignments


def test_writer_requires_context(tmp_path: Path):
    writer = SAMWriter(tmp_path / "out.sam")
    with pytest.raises(RuntimeError):
        writer.write_alignment(build_alignment())


def test_optional_field_requires_array_type():
    with pytest.raises(ValueError):
        OptionalField('ZB', OptionalFieldType.BYTE_ARRAY, ['1'])
    with pytest.raises(ValueError):
        OptionalField('NM', OptionalFieldType.INT32, 1, array_type='c')
