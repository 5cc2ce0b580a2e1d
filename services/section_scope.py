"""
섹션 범위(ALL / SPECIFIC / EXCLUDE) 해석
"""
from models import SectionScope


def _dedupe(ids):
    seen = set()
    result = []
    for sid in ids:
        key = str(sid)
        if key not in seen:
            seen.add(key)
            result.append(sid)
    return result


def resolve_sections(scope, selected, sections):
    """범위와 선택값으로 과목이 적용될 섹션 id 목록 반환

    sections 는 현재 카탈로그의 Section 목록. id 는 문자열 형태로 비교하므로
    폼에서 넘어온 "3" 과 카탈로그의 3 이 같은 섹션으로 취급된다.
    SPECIFIC / EXCLUDE 의 빈 선택 거부는 호출자 책임.
    """
    scope = SectionScope(scope)
    selected = list(selected or [])

    if scope is SectionScope.ALL:
        return tuple(_dedupe(s.id for s in sections))

    if scope is SectionScope.EXCLUDE:
        excluded = {str(sid) for sid in selected}
        return tuple(_dedupe(s.id for s in sections if str(s.id) not in excluded))

    return tuple(_dedupe(selected))
