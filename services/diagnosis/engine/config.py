# services/diagnosis/engine/config.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

# Ordered from beginner to advanced; distance between indexes drives the level deduction
LEVEL_ORDER = [
    "Lv0_超入門",
    "Lv1_入門",
    "Lv2_初級",
    "Lv3_初中級",
    "Lv4_中上級",
]

REQUIRED_QUESTION_IDS = ("Q1", "Q2", "Q3", "Q4", "Q5", "Q6")


@dataclass
class QuestionOption:
    id: str
    label: str
    tag: Optional[str] = None
    message_key: Optional[str] = None  # Q6 only
    is_online: bool = False  # Q1 only

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Question:
    id: str
    title: str
    key: str  # area / level / age / genre / teacher / concern
    description: Optional[str] = None
    options: list[QuestionOption] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


QUESTIONS: list[Question] = [
    Question(
        id="Q1",
        title="最も通いやすい「エリア・校舎」は？",
        description="（継続するためには「通いやすさ」が一番大切です！）",
        key="area",
        # replaced by the school's campuses when served over the API
        options=[
            QuestionOption(id="shibuya", label="渋谷校"),
            QuestionOption(id="shinjuku", label="新宿校"),
            QuestionOption(id="ikebukuro", label="池袋校"),
            QuestionOption(id="online", label="【オンライン】自宅で受講", is_online=True),
        ],
    ),
    Question(
        id="Q2",
        title="Q2. 経験・運動レベル",
        description="今の自分に一番近いものを選んでください。",
        key="level",
        options=[
            QuestionOption(id="2-1", label="運動自体がニガテ…リズム感にも自信がない", tag="Lv0_超入門"),
            QuestionOption(id="2-2", label="運動は普通にできるけど、ダンスは未経験", tag="Lv1_入門"),
            QuestionOption(id="2-3", label="昔少し習っていた / 学校の体育でやった程度", tag="Lv2_初級"),
            QuestionOption(id="2-4", label="基本的なステップなら踊れる（初級レベル）", tag="Lv3_初中級"),
            QuestionOption(id="2-5", label="本格的に習った経験がある / バリバリ踊りたい", tag="Lv4_中上級"),
        ],
    ),
    Question(
        id="Q3",
        title="Q3. 年代・ライフスタイル",
        description="通う人の年代に近いものを選んでください。",
        key="age",
        options=[
            QuestionOption(id="3-1", label="未就学児（3歳〜6歳くらい）", tag="Age_Kids"),
            QuestionOption(id="3-2", label="小学生（キッズ）", tag="Age_Elementary"),
            QuestionOption(id="3-3", label="中学生・高校生", tag="Age_Teen"),
            QuestionOption(id="3-4", label="大学生・専門学生", tag="Age_Student"),
            QuestionOption(id="3-5", label="社会人（お仕事をしている方）", tag="Age_Adult_Work"),
            QuestionOption(id="3-6", label="主婦・主夫（日中の時間を活用）", tag="Age_Adult_Day"),
        ],
    ),
    Question(
        id="Q4",
        title="Q4. 好みの音楽・雰囲気",
        description="一番「踊ってみたい！」と思うものを選んでください。",
        key="genre",
        options=[
            QuestionOption(id="4-1", label="K-POP・流行りの曲", tag="Genre_KPOP"),
            QuestionOption(id="4-2", label="重低音の効いたカッコいい洋楽", tag="Genre_HIPHOP"),
            QuestionOption(id="4-3", label="オシャレでゆったりした曲", tag="Genre_JAZZ"),
            QuestionOption(id="4-4", label="とにかく明るく楽しい曲", tag="Genre_ThemePark"),
            QuestionOption(id="4-5", label="まだ迷っている・色々見てみたい", tag="Genre_All"),
        ],
    ),
    Question(
        id="Q5",
        title="Q5. 理想の先生",
        description="どんな先生だと続けやすそうですか？",
        key="teacher",
        options=[
            QuestionOption(id="5-1", label="とにかく優しく！褒めて伸ばしてほしい", tag="Style_Healing"),
            QuestionOption(id="5-2", label="プロ志望！厳しくても本格的に指導してほしい", tag="Style_Hard"),
            QuestionOption(id="5-3", label="実績のあるベテラン講師に、基礎から丁寧に習いたい", tag="Style_Logical"),
            QuestionOption(id="5-4", label="先生というより「友達」みたいに接してほしい", tag="Style_Friendly"),
        ],
    ),
    Question(
        id="Q6",
        title="Q6. 一番の不安",
        description="正直な気持ちに一番近いものを選んでください。",
        key="concern",
        options=[
            QuestionOption(id="6-1", label="周りのペースについていけるか", message_key="Msg_Pace"),
            QuestionOption(id="6-2", label="教室の雰囲気に馴染めるか", message_key="Msg_Atmosphere"),
            QuestionOption(id="6-3", label="リズム感・運動神経に自信がない", message_key="Msg_Sense"),
            QuestionOption(id="6-4", label="しっかり上達できるか・レベルが低すぎないか", message_key="Msg_LevelUp"),
            QuestionOption(id="6-5", label="まだ勇気が出ない・色々不安", message_key="Msg_Consult"),
        ],
    ),
]

CONCERN_MESSAGES = {
    "Msg_Pace": (
        "最大8名までの少人数制なので、周りのペースについていけない…という不安を感じにくい環境です。"
        "振付もゆっくり丁寧に進めるので、マイペースに通えます。"
    ),
    "Msg_Atmosphere": (
        "体験レッスンでは、クラスの雰囲気や生徒さんの年齢層もチェックできます。"
        "「合わないかも…」と感じた場合は、クラス変更のご相談も可能なのでご安心ください。"
    ),
    "Msg_Sense": (
        "リズム感や運動神経よりも大切なのは“慣れ”です。"
        "基礎から少しずつ積み上げていくカリキュラムなので、今の段階で自信がなくても全く問題ありません。"
    ),
    "Msg_LevelUp": (
        "上達したい方向けに、レベル別クラスやステップアップ用のクラスもご用意しています。"
        "物足りなくなった場合は、次のクラスへのご案内も可能です。"
    ),
    "Msg_Consult": (
        "いきなり申込むのが不安な方は、まずは体験レッスンで雰囲気を見ていただくのがおすすめです。"
        "スタッフが目的や不安をヒアリングしながら、最適なクラスをご提案します。"
    ),
}

DEFAULT_CONCERN_KEY = "Msg_Consult"

# Q4 tag -> DiagnosisGenre.slug; "Genre_All" means no genre filter
GENRE_TAG_TO_SLUG = {
    "Genre_KPOP": "kpop",
    "Genre_HIPHOP": "hiphop",
    "Genre_JAZZ": "jazz",
    "Genre_ThemePark": "themepark",
}

DEFAULT_GENRES = [
    {"label": "K-POP", "slug": "kpop", "sort_order": 10},
    {"label": "HIPHOP", "slug": "hiphop", "sort_order": 20},
    {"label": "ジャズダンス", "slug": "jazz", "sort_order": 30},
    {"label": "アイドルダンス", "slug": "idol", "sort_order": 40},
    {"label": "テーマパークダンス", "slug": "themepark", "sort_order": 50},
    {"label": "特になし・わからない", "slug": "none", "sort_order": 60},
]

DEFAULT_LIFESTYLES = [
    {"label": "未就学児", "slug": "preschool", "sort_order": 10},
    {"label": "小学生", "slug": "elementary", "sort_order": 20},
    {"label": "中学生・高校生", "slug": "junior-high-high", "sort_order": 30},
    {"label": "大学生・専門学生", "slug": "college", "sort_order": 40},
    {"label": "社会人", "slug": "worker", "sort_order": 50},
    {"label": "主婦・主夫", "slug": "homemaker", "sort_order": 60},
]


def get_question(question_id: str) -> Optional[Question]:
    return next((q for q in QUESTIONS if q.id == question_id), None)


def get_option(question_id: str, option_id: Optional[str]) -> Optional[QuestionOption]:
    if not option_id:
        return None
    question = get_question(question_id)
    if not question:
        return None
    return next((o for o in question.options if o.id == option_id), None)


def concern_key_for(option_id: Optional[str]) -> str:
    option = get_option("Q6", option_id)
    return (option.message_key if option else None) or DEFAULT_CONCERN_KEY


def genre_slug_for(option_id: Optional[str]) -> Optional[str]:
    option = get_option("Q4", option_id)
    return GENRE_TAG_TO_SLUG.get(option.tag if option else "Genre_All")


def q2_values(option_id: Optional[str]) -> list[str]:
    """Every value a course or result may use to refer to a Q2 answer."""
    option = get_option("Q2", option_id)
    values = [option.tag, option.label] if option else []
    values.append((option_id or "").strip())
    return [v for v in dict.fromkeys(values) if v]
