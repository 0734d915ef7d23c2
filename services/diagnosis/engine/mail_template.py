# services/diagnosis/engine/mail_template.py
import re
from typing import Mapping, Optional

# a single address on a single line
USER_EMAIL_PATTERN = re.compile(r"[^\s,;]+@[^\s,;]+\.[^\s,;]+")
PLACEHOLDER = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")

DEFAULT_ADMIN_SUBJECT = "【診断フォーム】新しいお問い合わせ"
DEFAULT_ADMIN_BODY = (
    "新しいフォーム送信がありました。\n\n【入力内容】\n{{fieldsText}}\n\n"
    "送信日時: {{submittedAt}}\nschoolId: {{schoolId}}\n"
)
DEFAULT_USER_SUBJECT = "お問い合わせありがとうございます"
DEFAULT_USER_BODY = (
    "{{fields.お名前}} 様\n\nこの度はお問い合わせありがとうございます。\n"
    "内容を確認のうえ、担当よりご連絡いたします。\n\n【送信内容】\n{{fieldsText}}\n\n--\n{{schoolId}}\n"
)


def build_fields_text(fields: Mapping[str, object]) -> str:
    return "\n".join(f"{key}: {value}" for key, value in fields.items())


def find_user_email(fields: Mapping[str, object]) -> Optional[str]:
    for value in fields.values():
        text = "" if value is None else str(value).strip()
        if USER_EMAIL_PATTERN.fullmatch(text):
            return text
    return None


def build_template_vars(
    fields: Mapping[str, object],
    hidden_values: Mapping[str, object],
    school_id: str,
    submitted_at: str,
    user_email: Optional[str],
) -> dict[str, str]:
    variables = {
        "fieldsText": build_fields_text(fields),
        "hiddenText": build_fields_text(hidden_values),
        "submittedAt": submitted_at,
        "schoolId": school_id,
        "userEmail": user_email or "",
    }
    for key, value in fields.items():
        variables[f"fields.{key}"] = "" if value is None else str(value)
    return variables


def render(template: Optional[str], variables: Mapping[str, str]) -> str:
    """Replace {{name}} placeholders; unknown names are left as written."""
    def _sub(match):
        name = match.group(1)
        return variables[name] if name in variables else match.group(0)

    return PLACEHOLDER.sub(_sub, template or "")


def normalize_csv_emails(value: Optional[str]) -> str:
    if not value:
        return ""
    text = str(value).replace("\r\n", ",").replace("\n", ",").replace(";", ",")
    return ",".join(part.strip() for part in text.split(",") if part.strip())
