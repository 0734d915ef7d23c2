# services/diagnosis/engine/result_copy.py
# Fixed copy shown next to each answer on the result page

LEVEL_RESULT_COPY = {
    "Lv0_超入門": "準備運動やリズム取りから始めるので、運動が苦手でも大丈夫です。",
    "Lv1_入門": "基本のステップから一つずつ。未経験の方が一番多いレベルです。",
    "Lv2_初級": "昔の経験を思い出しながら、基礎を固め直せます。",
    "Lv3_初中級": "踊れるステップを増やして、振付を通しで踊る楽しさを味わえます。",
    "Lv4_中上級": "表現力やテクニックまで、本格的にレベルアップを目指せます。",
}

AGE_RESULT_COPY = {
    "Age_Kids": "小さなお子さまでも楽しめるよう、遊びの要素を取り入れています。",
    "Age_Elementary": "学校の授業や発表会にも役立つ基礎が身につきます。",
    "Age_Teen": "部活や勉強と両立しやすい時間帯のクラスがあります。",
    "Age_Student": "同世代の仲間と一緒に、楽しく続けられます。",
    "Age_Adult_Work": "仕事帰りに通いやすい夜のクラスを中心にご案内します。",
    "Age_Adult_Day": "平日の日中に通えるクラスで、無理なく続けられます。",
}

TEACHER_RESULT_COPY = {
    "Style_Healing": "できたことをしっかり褒めてくれる先生が、優しくサポートします。",
    "Style_Hard": "プロの現場を知る先生が、本気で上達したい気持ちに応えます。",
    "Style_Logical": "動きの理由まで丁寧に説明してくれるので、基礎から確実に身につきます。",
    "Style_Friendly": "気軽に話せる先生なので、初めてでもリラックスして参加できます。",
}

CONCERN_RESULT_COPY = {
    "Msg_Pace": "少人数制なので、自分のペースで無理なく進められます。",
    "Msg_Atmosphere": "体験レッスンで雰囲気を確かめてから決められます。",
    "Msg_Sense": "リズム感は通ううちに自然と身につきます。今は自信がなくて大丈夫です。",
    "Msg_LevelUp": "レベルに合わせてクラスを変えながら、着実に上達できます。",
    "Msg_Consult": "不安なことは体験レッスンでスタッフに何でもご相談ください。",
}

DEFAULT_LEVEL_COPY = "あなたのペースに合わせて進められます。"
DEFAULT_AGE_COPY = "生活スタイルに合わせて通えます。"
DEFAULT_TEACHER_COPY = "あなたに合う先生と出会えます。"
DEFAULT_CONCERN_COPY = "不安を一緒に解消できます。"

SUBLINE = "予約は1分で完了。しつこい営業はありません。"
FALLBACK_CLASS_NAME = "おすすめクラス"
FALLBACK_TEACHER_NAME = "おすすめ講師"
