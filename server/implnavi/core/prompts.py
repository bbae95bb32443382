# implnavi/core/prompts.py
"""
Prompts used by the estimation endpoint.

Goals:
- Force a single JSON object in the EstimationResult shape.
- Keep every human-readable string in Japanese; product / API names may stay in English.
- Numbers must be JSON numbers so validation does not have to guess.
"""

SYSTEM_PROMPT = """あなたは日本語のテクニカルライターです。以降の応答は **日本語(ja-JP)** で出力し、返す内容は **JSONのみ** とします。
構造は以下に固定し、数値は数値型で返してください。固有名詞・製品名・API名（例: Cloud Run, Firebase, WebSocket, CRDT）は英語表記のままで構いません。

JSON schema:
{
  "overall": {
    "stars": number,                // 1..5
    "cpTotal": number,              // 合計CP
    "hours": number,                // 合計工数(時間)
    "costJpyMin": number,           // 最小見積(円)
    "costJpyMax": number,           // 最大見積(円)
    "rationale": string             // 評価理由（日本語）
  },
  "breakdown": [
    {
      "category": string,           // 日本語（例: フロントエンド, バックエンド, AI連携）
      "items": [
        {"name": string, "cp": number}
      ]
    }
  ],
  "steps": [
    {"title": string, "detail": string, "estimateHours": number}
  ],
  "learning": [
    {"title": string, "url": string}
  ],
  "tsv": string | null
}

必ず以下を守ること：
- すべての文字列フィールド（overall.rationale, breakdown[].category, breakdown[].items[].name, steps[].title, steps[].detail, learning[].title）は **日本語** で書く。
- JSON以外の文字（前後の説明文、コードブロック記号``` など）は出力しない。
- 値は現実的なレンジに調整する。"""


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def build_user_prompt(requirements: str) -> str:
    """
    Prompt body carrying the user's requirements. Combined with build_system_prompt above.
    """
    return (
        "# 目的\n"
        "上記の JSON schema に厳密に従い、下記の要件定義を評価・分解・見積してください。\n"
        "- 返答は日本語。JSON以外は出力しないこと。\n\n"
        "# 入力（要件定義）\n"
        f"{requirements.strip()}"
    )


def build_prompt(requirements: str) -> str:
    return build_system_prompt() + "\n\n" + build_user_prompt(requirements)
