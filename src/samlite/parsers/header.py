from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..errors import StructuralError
from ..models.header import (
    Comment,
    HeaderItem,
    HeaderItemTag,
    HeaderLine,
    OtherHeaderItem,
    Program,
    ReadGroup,
    RefSeq,
    TagValue,
)
from .fields import (
    parse_int,
    parse_int_range,
    parse_platform,
    parse_run_date,
    parse_sort_order,
    parse_tag_value,
)

HD_TAGS = ('VN', 'SO')
SQ_TAGS = ('SN', 'LN', 'AS', 'M5', 'SP', 'UR')
RG_TAGS = ('ID', 'CN', 'DS', 'DT', 'FO', 'KS', 'LB', 'PG', 'PI', 'PL', 'PU', 'SM')
PG_TAGS = ('ID', 'PN', 'CL', 'PP', 'DS', 'VN')


def parse_header_item_tag(text: str) -> HeaderItemTag:
    """Read the leading '@XX' of a header line.

    Any well-formed tag outside the standard kinds is HeaderItemTag.OTHER.
    """
    if not text.startswith('@'):
        raise StructuralError(f"header item tag must begin with @: {text!r}")
    name = text[1:]
    if name in ('HD', 'SQ', 'RG', 'PG', 'CO'):
        return HeaderItemTag(name)
    if OtherHeaderItem.TAG_PATTERN.fullmatch(name):
        return HeaderItemTag.OTHER
    raise StructuralError(f"invalid header item tag: {text!r}")


def find_all(tag_values: Iterable[TagValue], tag: str) -> List[str]:
    return [value for key, value in tag_values if key == tag]


def find1(item_tag: HeaderItemTag, tag_values: List[TagValue], tag: str) -> str:
    """Return the value of a tag that must occur exactly once."""
    values = find_all(tag_values, tag)
    if not values:
        raise StructuralError(f"required tag not found: @{item_tag.value} {tag}")
    if len(values) > 1:
        raise StructuralError(f"tag found multiple times: @{item_tag.value} {tag} {values}")
    return values[0]


def find01(item_tag: HeaderItemTag, tag_values: List[TagValue], tag: str) -> Optional[str]:
    """Return the value of a tag that may occur at most once."""
    values = find_all(tag_values, tag)
    if len(values) > 1:
        raise StructuralError(f"tag found multiple times: @{item_tag.value} {tag} {values}")
    return values[0] if values else None


def assert_tags(item_tag: HeaderItemTag, tag_values: List[TagValue], allowed: Tuple[str, ...]) -> None:
    unexpected = sorted({key for key, _ in tag_values} - set(allowed))
    if unexpected:
        raise StructuralError(
            f"unexpected tag for given header item type: @{item_tag.value} {', '.join(unexpected)}")


def parse_header_line(tag_values: List[TagValue]) -> HeaderLine:
    version = find1(HeaderItemTag.HD, tag_values, 'VN')
    sort_order = find01(HeaderItemTag.HD, tag_values, 'SO')
    assert_tags(HeaderItemTag.HD, tag_values, HD_TAGS)
    return HeaderLine(
        version=version,
        sort_order=parse_sort_order(sort_order) if sort_order is not None else None,
    )


def parse_ref_seq(tag_values: List[TagValue]) -> RefSeq:
    name = find1(HeaderItemTag.SQ, tag_values, 'SN')
    length = parse_int('LN', find1(HeaderItemTag.SQ, tag_values, 'LN'))
    fields = {key: find01(HeaderItemTag.SQ, tag_values, key) for key in SQ_TAGS[2:]}
    assert_tags(HeaderItemTag.SQ, tag_values, SQ_TAGS)
    return RefSeq(
        name=name,
        length=length,
        assembly=fields['AS'],
        md5=fields['M5'],
        species=fields['SP'],
        uri=fields['UR'],
    )


def parse_read_group(tag_values: List[TagValue]) -> ReadGroup:
    read_group_id = find1(HeaderItemTag.RG, tag_values, 'ID')
    fields = {key: find01(HeaderItemTag.RG, tag_values, key) for key in RG_TAGS[1:]}
    assert_tags(HeaderItemTag.RG, tag_values, RG_TAGS)

    run_date = parse_run_date(fields['DT']) if fields['DT'] is not None else None
    insert_size = None
    if fields['PI'] is not None:
        insert_size = parse_int_range('PI', -2**63, 2**63 - 1, fields['PI'])
    platform = parse_platform(fields['PL']) if fields['PL'] is not None else None

    return ReadGroup(
        id=read_group_id,
        seq_center=fields['CN'],
        description=fields['DS'],
        run_date=run_date,
        flow_order=fields['FO'],
        key_seq=fields['KS'],
        library=fields['LB'],
        program=fields['PG'],
        predicted_median_insert_size=insert_size,
        platform=platform,
        platform_unit=fields['PU'],
        sample=fields['SM'],
    )


def parse_program(tag_values: List[TagValue]) -> Program:
    program_id = find1(HeaderItemTag.PG, tag_values, 'ID')
    fields = {key: find01(HeaderItemTag.PG, tag_values, key) for key in PG_TAGS[1:]}
    assert_tags(HeaderItemTag.PG, tag_values, PG_TAGS)
    return Program(
        id=program_id,
        name=fields['PN'],
        command_line=fields['CL'],
        previous_id=fields['PP'],
        description=fields['DS'],
        version=fields['VN'],
    )


def parse_header_item(line: str) -> HeaderItem:
    """Parse one '@' line of the header section.

    Args:
        line: Header line without its trailing newline

    Returns:
        HeaderLine, RefSeq, ReadGroup, Program, Comment or OtherHeaderItem

    Raises:
        StructuralError: if the line shape or its tag set is wrong
        FieldError: if a tag value fails validation
    """
    tag, sep, data = line.partition('\t')
    if not sep:
        raise StructuralError(f"header line contains no tabs: {line!r}")
    item_tag = parse_header_item_tag(tag)
    if item_tag is HeaderItemTag.CO:
        return Comment(data)
    if data == '':
        raise StructuralError(f"header contains no data: {tag}")

    tag_values = [parse_tag_value(field) for field in data.split('\t')]
    if item_tag is HeaderItemTag.HD:
        return parse_header_line(tag_values)
    elif item_tag is HeaderItemTag.SQ:
        return parse_ref_seq(tag_values)
    elif item_tag is HeaderItemTag.RG:
        return parse_read_group(tag_values)
    elif item_tag is HeaderItemTag.PG:
        return parse_program(tag_values)
    return OtherHeaderItem(tag[1:], tag_values)
