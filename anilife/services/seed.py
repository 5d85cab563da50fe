"""
Demo catalog loaded into a fresh store: four featured titles, two regional
originals and four latest releases, each with its first few episodes.
"""

from loguru import logger

from anilife.core.constants import SEED_EPISODE_DURATION, SEED_EPISODES_PER_TITLE
from anilife.models.catalog import EpisodeCreate, ReleaseStatus, TitleCreate
from anilife.services.catalog_store import CatalogStorage

_IMG = "https://images.unsplash.com/photo-{photo}?ixlib=rb-4.0.3&auto=format&fit=crop&w={w}&h={h}"


def _thumb(photo: str, w: int = 400, h: int = 500) -> str:
    return _IMG.format(photo=photo, w=w, h=h)


FEATURED_TITLES: list[TitleCreate] = [
    TitleCreate(
        name="진격의 거인 파이널 시즌",
        synopsis="인류의 운명을 건 최후의 전투가 시작된다. 엘런과 동료들의 마지막 이야기.",
        genre="액션",
        rating="9.8",
        episode_count=24,
        status=ReleaseStatus.COMPLETED,
        year=2023,
        thumbnail_url=_thumb("1578662996442-48f60103fc96"),
        hero_image_url=_thumb("1578662996442-48f60103fc96", 1920, 1080),
        is_featured=True,
        is_latest=True,
    ),
    TitleCreate(
        name="귀멸의 칼날 도공마을편",
        synopsis="탄지로와 네즈코의 새로운 모험. 도공마을에서 펼쳐지는 치열한 전투.",
        genre="액션",
        rating="9.5",
        episode_count=11,
        status=ReleaseStatus.COMPLETED,
        year=2023,
        thumbnail_url=_thumb("1612198188060-c7c2a3b66eae"),
        is_featured=True,
        is_latest=True,
    ),
    TitleCreate(
        name="주술회전 시부야 사변편",
        synopsis="시부야를 무대로 펼쳐지는 저주사들과 저주의 전면전쟁.",
        genre="액션",
        rating="9.3",
        episode_count=23,
        status=ReleaseStatus.ONGOING,
        year=2023,
        thumbnail_url=_thumb("1606107557195-0e29a4b5b4aa"),
        is_featured=True,
        is_latest=True,
    ),
    TitleCreate(
        name="원피스 와노쿠니편",
        synopsis="루피와 밀짚모자 일당의 와노쿠니에서의 대모험이 시작된다.",
        genre="모험",
        rating="9.7",
        episode_count=120,
        status=ReleaseStatus.ONGOING,
        year=2023,
        thumbnail_url=_thumb("1613376023733-0a73315d9b06"),
        is_featured=True,
    ),
]

REGIONAL_TITLES: list[TitleCreate] = [
    TitleCreate(
        name="신의 탑",
        synopsis=(
            "탑을 오르는 소년의 모험을 그린 한국 웹툰 원작 애니메이션. "
            "독특한 세계관과 매력적인 캐릭터들이 펼치는 대서사시."
        ),
        genre="액션",
        rating="8.9",
        episode_count=13,
        status=ReleaseStatus.COMPLETED,
        year=2020,
        thumbnail_url=_thumb("1493225457124-a3eb161ffa5f"),
        is_regional_original=True,
    ),
    TitleCreate(
        name="고스트메신저",
        synopsis=(
            "죽은 자들의 메시지를 전하는 특별한 능력을 가진 소년의 이야기. "
            "한국적 정서가 담긴 감동적인 스토리."
        ),
        genre="드라마",
        rating="8.7",
        episode_count=6,
        status=ReleaseStatus.COMPLETED,
        year=2021,
        thumbnail_url=_thumb("1611162616475-46b635cb6868"),
        is_regional_original=True,
    ),
]

LATEST_TITLES: list[TitleCreate] = [
    TitleCreate(
        name="체인소 맨",
        synopsis="악마와 계약한 소년의 잔혹한 이야기",
        genre="액션",
        rating="9.1",
        episode_count=12,
        status=ReleaseStatus.COMPLETED,
        year=2023,
        thumbnail_url=_thumb("1578662996442-48f60103fc96", 300, 400),
        is_latest=True,
    ),
    TitleCreate(
        name="스파이 패밀리",
        synopsis="가짜 가족의 따뜻한 이야기",
        genre="코미디",
        rating="9.4",
        episode_count=25,
        status=ReleaseStatus.ONGOING,
        year=2023,
        thumbnail_url=_thumb("1606107557195-0e29a4b5b4aa", 300, 400),
        is_latest=True,
    ),
    TitleCreate(
        name="나의 히어로 아카데미아",
        synopsis="히어로를 꿈꾸는 소년의 성장기",
        genre="액션",
        rating="8.8",
        episode_count=138,
        status=ReleaseStatus.ONGOING,
        year=2023,
        thumbnail_url=_thumb("1612198188060-c7c2a3b66eae", 300, 400),
        is_latest=True,
    ),
    TitleCreate(
        name="이세계 아이돌",
        synopsis="다른 세계에서 아이돌이 된 소녀의 이야기",
        genre="판타지",
        rating="8.5",
        episode_count=12,
        status=ReleaseStatus.COMPLETED,
        year=2023,
        thumbnail_url=_thumb("1613376023733-0a73315d9b06", 300, 400),
        is_latest=True,
    ),
]

SEED_TITLES: list[TitleCreate] = FEATURED_TITLES + REGIONAL_TITLES + LATEST_TITLES


def seed_catalog(store: CatalogStorage, titles: list[TitleCreate] | None = None) -> CatalogStorage:
    """Insert the demo titles and episodes 1..min(episode_count, 6) of each."""
    titles = SEED_TITLES if titles is None else titles
    episode_total = 0
    for data in titles:
        title = store.create_title(data)
        for number in range(1, min(title.episode_count, SEED_EPISODES_PER_TITLE) + 1):
            store.create_episode(
                EpisodeCreate(
                    title_id=title.id,
                    episode_number=number,
                    name=f"{number}화",
                    duration=SEED_EPISODE_DURATION,
                )
            )
            episode_total += 1

    logger.info(f"Seeded catalog with {len(titles)} titles and {episode_total} episodes")
    return store
