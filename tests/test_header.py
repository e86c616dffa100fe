from __future__ import annotations

from datetime import date

import pytest

from samlite.errors import FieldError, HeaderError, HeaderValidationError, StructuralError
from samlite.models.header import (
    Comment,
    Header,
    HeaderItemTag,
    HeaderLine,
    OtherHeaderItem,
    Platform,
    Program,
    ReadGroup,
    RefSeq,
    SortOrder,
)
from samlite.parsers.header import parse_header_item, parse_header_item_tag
from samlite.processors.header import HeaderBuilder, build_header


### item tags

def test_header_item_tags():
    assert parse_header_item_tag('@HD') is HeaderItemTag.HD
    assert parse_header_item_tag('@CO') is HeaderItemTag.CO
    assert parse_header_item_tag('@zz') is HeaderItemTag.OTHER
    for bad in ['HD', '@H', '@H1', '@HDX']:
        with pytest.raises(StructuralError):
            parse_header_item_tag(bad)


### per-kind parsing

def test_parse_hd():
    item = parse_header_item('@HD\tVN:1.6\tSO:coordinate')
    assert item == HeaderLine(version='1.6', sort_order=SortOrder.COORDINATE)
    assert item.item_tag is HeaderItemTag.HD


def test_hd_requires_version_even_with_sort_order():
    with pytest.raises(StructuralError, match="required tag not found: @HD VN"):
        parse_header_item('@HD\tSO:coordinate')


def test_hd_rejects_unexpected_tag():
    with pytest.raises(StructuralError, match="unexpected tag"):
        parse_header_item('@HD\tVN:1.6\tGO:query')


def test_hd_rejects_repeated_tag():
    with pytest.raises(StructuralError, match="multiple times"):
        parse_header_item('@HD\tVN:1.6\tVN:1.5')


def test_hd_invalid_version():
    with pytest.raises(FieldError, match="invalid version"):
        parse_header_item('@HD\tVN:one')


def test_parse_sq():
    item = parse_header_item('@SQ\tSN:chr1\tLN:248956422\tAS:GRCh38\tM5:6aef897c3d6ff0c78aff06ac189178dd\tSP:Homo sapiens')
    assert isinstance(item, RefSeq)
    assert item.name == 'chr1'
    assert item.length == 248956422
    assert item.assembly == 'GRCh38'
    assert item.species == 'Homo sapiens'
    assert item.uri is None


@pytest.mark.parametrize("line,error", [
    ('@SQ\tSN:chr1', StructuralError),           # LN missing
    ('@SQ\tLN:100', StructuralError),            # SN missing
    ('@SQ\tSN:chr1\tLN:0', FieldError),
    ('@SQ\tSN:chr1\tLN:2147483648', FieldError),
    ('@SQ\tSN:chr1\tLN:ten', FieldError),
    ('@SQ\tSN:*chr1\tLN:10', FieldError),
    ('@SQ\tSN:=chr1\tLN:10', FieldError),
    ('@SQ\tSN:@chr1\tLN:10', FieldError),
    ('@SQ\tSN:[chr1\tLN:10', FieldError),
    ('@SQ\tSN:chr1\tLN:10\tID:x', StructuralError),
])
def test_sq_invalid(line, error):
    with pytest.raises(error):
        parse_header_item(line)


def test_ref_seq_name_may_contain_special_chars_after_first():
    assert RefSeq(name='chr1*=@[', length=5).name == 'chr1*=@['


def test_parse_rg():
    item = parse_header_item(
        '@RG\tID:rg1\tSM:NA12878\tPL:ILLUMINA\tDT:2013-05-01\tPI:350\tFO:*\tLB:lib1\tCN:BI')
    assert isinstance(item, ReadGroup)
    assert item.id == 'rg1'
    assert item.sample == 'NA12878'
    assert item.platform is Platform.ILLUMINA
    assert item.run_date == date(2013, 5, 1)
    assert item.predicted_median_insert_size == 350
    assert item.flow_order == '*'
    assert item.library == 'lib1'
    assert item.seq_center == 'BI'


@pytest.mark.parametrize("line", [
    '@RG\tSM:x',
    '@RG\tID:rg1\tPL:nanopore',
    '@RG\tID:rg1\tFO:ACGU',
    '@RG\tID:rg1\tPI:wide',
    '@RG\tID:rg1\tDT:yesterday',
    '@RG\tID:rg1\tXX:1',
])
def test_rg_invalid(line):
    with pytest.raises((StructuralError, FieldError)):
        parse_header_item(line)


def test_rg_flow_order_iupac():
    item = parse_header_item('@RG\tID:rg1\tFO:TACGTACGTCTGAGCATCGATCGATGTACAGC')
    assert item.flow_order.startswith('TACG')


def test_read_group_empty_flow_order():
    with pytest.raises(FieldError, match="invalid empty flow order"):
        ReadGroup(id='rg1', flow_order='')


def test_parse_pg():
    item = parse_header_item('@PG\tID:bwa\tPN:bwa\tVN:0.7.17\tCL:bwa mem ref.fa r1.fq')
    assert item == Program(id='bwa', name='bwa', version='0.7.17', command_line='bwa mem ref.fa r1.fq')


def test_pg_requires_id():
    with pytest.raises(StructuralError, match="@PG ID"):
        parse_header_item('@PG\tPN:bwa')


def test_parse_co_keeps_tabs():
    item = parse_header_item('@CO\tfree text\twith a tab')
    assert item == Comment('free text\twith a tab')


def test_parse_other():
    item = parse_header_item('@XY\tAB:1\tCD:two')
    assert item == OtherHeaderItem('XY', [('AB', '1'), ('CD', 'two')])
    assert item.item_tag is HeaderItemTag.OTHER


@pytest.mark.parametrize("line", ['@HD', '@HD\t', '@XY\tnot-a-pair', '@X1\tAB:1', 'HD\tVN:1.6'])
def test_malformed_header_lines(line):
    with pytest.raises((StructuralError, FieldError)):
        parse_header_item(line)


### aggregation

def test_build_header_preserves_order():
    lines = [
        '@HD\tVN:1.6\tSO:unsorted',
        '@SQ\tSN:chr2\tLN:200',
        '@CO\tfirst',
        '@SQ\tSN:chr1\tLN:100',
        '@RG\tID:b',
        '@RG\tID:a',
        '@PG\tID:p1',
        '@CO\tsecond',
        '@XY\tAB:1',
    ]
    header = build_header(parse_header_item(line) for line in lines)
    assert header.version == '1.6'
    assert header.sort_order is SortOrder.UNSORTED
    assert [r.name for r in header.ref_seqs] == ['chr2', 'chr1']
    assert [r.id for r in header.read_groups] == ['b', 'a']
    assert [p.id for p in header.programs] == ['p1']
    assert header.comments == ('first', 'second')
    assert header.others == (OtherHeaderItem('XY', (('AB', '1'),)),)
    assert header.sequence_lengths == {'chr2': 200, 'chr1': 100}
    assert header.ref_seq('chr1').length == 100
    assert header.read_group('a').id == 'a'
    assert header.program('missing') is None


def test_empty_header():
    header = build_header([])
    assert header == Header()
    assert header.to_lines() == []


def test_multiple_hd_rejected():
    builder = HeaderBuilder()
    builder.add(parse_header_item('@HD\tVN:1.6'))
    with pytest.raises(HeaderError, match="multiple @HD"):
        builder.add(parse_header_item('@HD\tVN:1.5'))


def test_duplicate_ref_seq_names():
    items = [parse_header_item('@SQ\tSN:chr1\tLN:10'), parse_header_item('@SQ\tSN:chr1\tLN:20')]
    with pytest.raises(HeaderValidationError, match="duplicate ref seq name: chr1"):
        build_header(items)


def test_sort_order_without_version():
    with pytest.raises(HeaderValidationError, match="sort order cannot be defined without version"):
        Header(sort_order=SortOrder.COORDINATE)


def test_header_reports_all_failures_together():
    with pytest.raises(HeaderValidationError) as excinfo:
        Header(
            sort_order=SortOrder.COORDINATE,
            ref_seqs=[RefSeq('chr1', 10), RefSeq('chr1', 10), RefSeq('chr2', 5), RefSeq('chr2', 5)],
        )
    messages = [e.message for e in excinfo.value.errors]
    assert len(messages) == 3
    assert any('sort order' in m for m in messages)
    assert any('chr1' in m for m in messages)
    assert any('chr2' in m for m in messages)


def test_header_invalid_version():
    with pytest.raises(HeaderValidationError):
        Header(version='x')


def test_header_collections_are_immutable():
    header = build_header([parse_header_item('@SQ\tSN:chr1\tLN:10'), parse_header_item('@CO\tnote')])
    assert isinstance(header.ref_seqs, tuple)
    with pytest.raises(AttributeError):
        header.ref_seqs.append(RefSeq('chr1', 10))
    assert Header(ref_seqs=[RefSeq('chr1', 10)], comments=['note']) == header


def test_sq_length_with_too_many_digits():
    with pytest.raises(FieldError, match="LN not an int"):
        parse_header_item('@SQ\tSN:chr1\tLN:' + '1' * 5000)


def test_builder_len():
    builder = HeaderBuilder()
    builder.add(HeaderLine('1.6'))
    builder.add(Comment('hi'))
    assert len(builder) == 2
    with pytest.raises(TypeError):
        builder.add('@CO\thi')


### serialization

@pytest.mark.parametrize("line", [
    '@HD\tVN:1.6\tSO:coordinate',
    '@HD\tVN:1.0',
    '@SQ\tSN:chr1\tLN:100\tAS:hg19\tM5:abc\tSP:human\tUR:file:///ref.fa',
    '@RG\tID:rg1\tCN:BI\tDS:desc\tDT:2013-05-01\tFO:*\tKS:TCAG\tLB:lib\tPG:bwa\tPI:300\tPL:PACBIO\tPU:unit\tSM:s1',
    '@PG\tID:bwa\tPN:bwa\tCL:bwa mem\tPP:prev\tDS:aligner\tVN:0.7',
    '@CO\tsome\tcomment',
    '@XY\tAB:1\tCD:two',
])
def test_header_item_line_round_trip(line):
    item = parse_header_item(line)
    assert item.to_line() == line
    assert parse_header_item(item.to_line()) == item


def test_header_item_reparse_with_datetime():
    item = parse_header_item('@RG\tID:rg1\tDT:2013-05-01T10:20:30')
    assert parse_header_item(item.to_line()) == item


def test_header_to_lines():
    header = Header(
        version='1.6',
        sort_order=SortOrder.QUERY_NAME,
        ref_seqs=[RefSeq('chr1', 10)],
        comments=['note'],
    )
    assert header.to_lines() == ['@HD\tVN:1.6\tSO:queryname', '@SQ\tSN:chr1\tLN:10', '@CO\tnote']
