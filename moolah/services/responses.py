"""Conversational replies of the bot.

Replies are drawn from pools keyed by personality, language and, for the
non-neutral personalities, the expense category. The random source is
injected so callers can pin a seed or inspect a whole pool.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Final

from moolah.services.categories import DEFAULT_CATEGORY
from moolah.services.currencies import format_amount
from moolah.services.state import ChatbotSettings, Expense

PoolTable = dict[str, dict[str, dict[str, tuple[str, ...]]]]

EXPENSE_RESPONSES: Final[PoolTable] = {
    "sarcastic": {
        "en": {
            "food": (
                "${amount} on {description}? I hope it was at least Instagram-worthy, {user}! 📸",
                "Another ${amount} for food, {user}? Your wallet is on a diet but apparently you're not! 🍔",
                "{description} for ${amount}? Living the high life, I see! 🥂",
                "${amount} on food again? At this rate, you'll be eating ramen by month-end, {user}! 🍜",
                "Wow, {description} cost you ${amount}? Hope it came with a side of financial wisdom! 💸",
                "Spending ${amount} on {description}? I hope it was worth every calorie! 😏",
                "Food again, {user}? Your taste buds must be living their best life!",
                "If only your savings grew as fast as your food expenses, {user}!",
                "Is this a food diary or an expense tracker, {user}?",
                "Your stomach must be happier than your bank account!",
            ),
            "transport": (
                "${amount} for {description}? Gas prices or your driving skills - which is more expensive? 🚗",
                "Another ${amount} on transport, {user}? Maybe it's time to invest in a bike! 🚲",
                "{description} - ${amount}? Your car is more expensive than some people's rent! 💰",
                "You could have walked and saved ${amount}, {user}!",
                "Is your car running on gold, {user}?",
                "Maybe teleportation will be cheaper someday!",
                "At this rate, you'll be a shareholder in the local gas station!",
            ),
            "shopping": (
                "${amount} on {description}? Because you definitely needed another shopping spree, right {user}? 🛍️",
                "Shopping again? ${amount} for {description}... your closet must be bursting! 👗",
                "{description} for ${amount}? I'm sure it was absolutely essential! 🙄",
                "Retail therapy is real, but so is your credit card bill!",
                "You're single-handedly keeping the economy alive, {user}!",
                "Your closet called. It's running out of space!",
                "Impulse buy or investment? You decide!",
            ),
            "other": (
                "${amount} for {description}... interesting life choices, {user}! 🤔",
                "Well, there goes ${amount}, {user}! Money does grow on trees, right? 🌳💸",
                "{description} - ${amount}? Your financial advisor would be so proud! 📊",
                "Another ${amount} expense? At least you're consistent, {user}! 🎯",
                "${amount} on {description}? Bold financial strategy, let's see how it plays out! 🎲",
                "That's one way to spend ${amount}, I guess!",
                "You're making it rain, {user}!",
                "I hope this was worth every penny!",
            ),
        },
        "ja": {
            "food": (
                "{description}に{amount}ドル？インスタ映えしたでしょうね、{user}さん！📸",
                "また食事に{amount}ドル、{user}さん？お財布がダイエット中ですね！🍔",
                "{description}に{amount}ドル？贅沢な生活ですね！🥂",
                "また食費に{amount}ドル？この調子だと月末にはカップラーメンですね、{user}さん！🍜",
                "また食べ物ですか？{user}さんの胃袋は幸せそうですね！",
                "財布よりお腹が満たされてますね！",
            ),
            "transport": (
                "{description}に{amount}ドル？ガソリン代か運転技術、どちらが高くつくんでしょう？🚗",
                "また交通費に{amount}ドル、{user}さん？自転車への投資を考えてみては？🚲",
                "歩けば無料ですよ、{user}さん！",
                "このままいくとガソリンスタンドの株主ですね！",
                "次はどこに行くんですか？宇宙？",
            ),
            "shopping": (
                "{description}に{amount}ドル？また買い物ですか、{user}さん？🛍️",
                "また買い物？{description}に{amount}ドル...クローゼットがパンパンでしょうね！👗",
                "衝動買いの達人ですね！",
                "経済を回してますね、{user}さん！",
                "本当に必要でしたか？",
            ),
            "other": (
                "{description}に{amount}ドル...面白い選択ですね、{user}さん！🤔",
                "{amount}ドルが飛んでいきましたね、{user}さん！お金は木に生えるんでしたっけ？🌳💸",
                "その使い方、斬新ですね！",
                "財布が泣いてますよ！",
                "お金の使い方がクリエイティブですね！",
            ),
        },
        "zh": {
            "food": (
                "{description}花了{amount}美元？希望至少很適合拍照，{user}！📸",
                "又在吃的上面花了{amount}美元，{user}？你的錢包在節食，你可沒有！🍔",
                "{description}要{amount}美元？生活過得真滋潤！🥂",
                "照這樣下去，月底只能吃泡麵了，{user}！🍜",
            ),
            "transport": (
                "{description}花了{amount}美元？油價貴還是你的車技貴？🚗",
                "又在交通上花了{amount}美元，{user}？該考慮買台腳踏車了！🚲",
                "走路可是免費的喔，{user}！",
            ),
            "shopping": (
                "{description}花了{amount}美元？你一定非常需要它吧，{user}？🛍️",
                "又買東西了？衣櫃快塞爆了吧！👗",
                "你一個人就撐起了整個經濟，{user}！",
            ),
            "other": (
                "{description}花了{amount}美元...真是有趣的選擇，{user}！🤔",
                "{amount}美元又飛走了，{user}！錢是樹上長出來的嗎？🌳💸",
                "這種花錢方式真有創意！",
                "你的錢包在哭泣喔！",
            ),
        },
    },
    "encouraging": {
        "en": {
            "food": (
                "Great job tracking, {user}! I've logged ${amount} for {description}. Fuel for your awesome day! 🌟",
                "${amount} for food - investing in your energy, {user}! Keep it up! 💪",
                "Nice! {description} for ${amount} - you deserve good food! 😊",
                "Excellent tracking! ${amount} on {description} - taking care of yourself is important! 🍽️",
                "Way to go! {description} logged at ${amount}. You're building great habits, {user}! 📈",
            ),
            "transport": (
                "Perfect! ${amount} for {description} - mobility is important for your goals! 🚗",
                "Great tracking! {description} at ${amount} - investing in getting places! 🛣️",
                "Awesome! ${amount} on transport - you're staying active and mobile! 🚀",
            ),
            "shopping": (
                "Nice work! ${amount} on {description} - treating yourself responsibly! 🛍️",
                "Great job logging! {description} for ${amount} - you deserve nice things! ✨",
                "Excellent! ${amount} shopping expense tracked - you're staying on top of your finances! 📊",
            ),
            "other": (
                "Perfect, {user}! I've recorded ${amount} for {description}. 📝",
                "${amount} expense logged successfully! You're doing great tracking, {user}! 👍",
                "Fantastic! {description} at ${amount} - your financial awareness is impressive! 🎯",
                "Well done! ${amount} tracked for {description}. Keep up the excellent work! 🌟",
                "Outstanding! Another expense logged at ${amount}. You're a tracking superstar, {user}! ⭐",
            ),
        },
        "ja": {
            "food": (
                "記録お疲れ様、{user}さん！{description}に{amount}ドルを記録しました。素晴らしい一日の燃料ですね！🌟",
                "食事に{amount}ドル - エネルギーへの投資ですね、{user}さん！頑張って！💪",
                "いいですね！{description}に{amount}ドル - 美味しい食事は大切です！😊",
                "素晴らしい記録！{description}に{amount}ドル - 自分を大切にすることは重要ですね！🍽️",
            ),
            "transport": (
                "完璧！{description}に{amount}ドル - 移動は目標達成に重要ですね！🚗",
                "素晴らしい記録！{description}に{amount}ドル - 移動への投資ですね！🛣️",
            ),
            "shopping": (
                "いい仕事！{description}に{amount}ドル - 責任を持って自分にご褒美ですね！🛍️",
                "記録お疲れ様！{description}に{amount}ドル - 素敵なものを手に入れる価値がありますね！✨",
            ),
            "other": (
                "完璧です、{user}さん！{description}に{amount}ドルを記録しました。📝",
                "{amount}ドルの支出を記録しました！記録を続けて素晴らしいです、{user}さん！👍",
                "素晴らしい！{description}に{amount}ドル - 財務意識が素晴らしいです！🎯",
            ),
        },
        "zh": {
            "food": (
                "記錄得很好，{user}！我已經記錄了{description}的{amount}美元。為你美好的一天加油！🌟",
                "食物花了{amount}美元 - 這是對你能量的投資，{user}！繼續保持！💪",
                "很好！{description}花了{amount}美元 - 你值得好食物！😊",
                "出色的記錄！{description}花了{amount}美元 - 照顧自己很重要！🍽️",
            ),
            "other": (
                "太棒了，{user}！已記錄{description}的{amount}美元。📝",
                "{amount}美元的支出記錄成功！你做得很好，{user}！👍",
                "很好！{description}花了{amount}美元 - 你的理財意識令人佩服！🎯",
            ),
        },
    },
}

NEUTRAL_RESPONSES: Final[dict[str, tuple[str, ...]]] = {
    "en": (
        "Expense logged: ${amount} for {description}",
        "Recorded ${amount} expense for {description}, {user}",
        "Successfully tracked: {description} - ${amount}",
        "Added to your expenses: ${amount} for {description}",
        "Expense entry complete: {description} at ${amount}",
    ),
    "ja": (
        "支出を記録しました：{description}に{amount}ドル",
        "{description}に{amount}ドルの支出を記録、{user}さん",
        "記録完了：{description} - {amount}ドル",
        "支出に追加：{description}に{amount}ドル",
    ),
    "zh": (
        "支出已記錄：{description}花了{amount}美元",
        "已記錄{description}的{amount}美元支出，{user}",
        "成功追蹤：{description} - {amount}美元",
        "已新增到您的支出：{description}花了{amount}美元",
    ),
}

ERROR_RESPONSES: Final[dict[str, dict[str, tuple[str, ...]]]] = {
    "sarcastic": {
        "en": (
            "Nice story, {user}, but I'm looking for numbers! Try something like 'Spent $10 on coffee' ☕️",
            "I'm not a mind reader, {user}. Give me an amount, and I'll do my magic! 💸",
            "Unless you paid $0 for that, I can't track it! Try again with an amount. 😏",
            "No expense detected! Unless you're paying me in compliments, I need a number. 😉",
            "I love a good chat, but I love numbers more. Give me an expense! 💰",
            "That's a fun message, but my job is to track spending. Try 'I spent $5 on snacks' ☕️",
            "I'm not your diary, {user}. I'm your expense tracker! Add an amount! 📒",
            "If you want to chat, call a friend. If you want to track expenses, give me a number! 😜",
        ),
        "ja": (
            "面白い話ですね、{user}さん。でも金額がないと記録できません！「コーヒーに500円使いました」みたいに教えてください☕️",
            "エスパーじゃないので、金額を教えてください、{user}さん！💸",
            "0円なら記録しませんよ！金額を入れてもう一度どうぞ。😏",
            "支出が見つかりません！褒め言葉じゃなくて金額をください😉",
            "雑談もいいですが、私は支出記録係です。金額を教えてください！💰",
            "私は日記じゃなくて家計簿です、{user}さん！金額を追加してください📒",
        ),
        "zh": (
            "這故事很有趣，但我需要金額才能記帳喔！試試「花了100元買咖啡」☕️",
            "我不是通靈師，請給我一個金額，{user}！💸",
            "除非你真的花了0元，不然請再加個數字。😏",
            "沒偵測到支出！除非你要誇獎我，不然請給我金額😉",
            "我很愛聊天，但更愛記帳。給我一筆支出吧！💰",
            "我是記帳機器人，不是日記本，{user}！請加上金額📒",
        ),
    },
    "encouraging": {
        "en": (
            "Oops! I didn't catch an amount. Try something like 'I spent $5 on snacks'! 🍪",
            "Let's track your spending! Just tell me how much you spent and on what. You got this! 💪",
            "Almost there! Add an amount, and I'll log it for you. 📈",
            "I'm here to help you track expenses! Try 'Bought coffee for $3' ☕️",
            "You're doing great! Just add a number and I'll take care of the rest. 🌟",
            "No expense detected, but I believe in you! Try '$10 for lunch' 🍱",
        ),
        "ja": (
            "あれ？金額が見つかりませんでした。「お菓子に300円使いました」みたいに入力してみてください🍪",
            "支出を記録しましょう！「何にいくら使ったか」教えてください。応援してます💪",
            "もう少し！金額を追加すれば記録できますよ📈",
            "支出が見つかりませんでしたが、あなたならできます！「昼食に1000円」など試してみてください🍱",
        ),
        "zh": (
            "哎呀！我沒看到金額。試試「我花了50元買零食」🍪",
            "讓我們一起記帳吧！只要告訴我花多少錢、花在哪裡就好。你可以的！💪",
            "快完成了！加上金額我就能幫你記錄囉📈",
            "沒偵測到支出，但我相信你！試試「午餐100元」🍱",
        ),
    },
    "neutral": {
        "en": (
            "I couldn't find an expense amount. Please include something like '$12 for lunch'.",
            "No amount detected. Try 'Bought groceries for $30'.",
            "Please enter an expense with an amount, e.g., 'Spent $20 on gas'.",
            "No expense found. Try 'I spent $15 on dinner'.",
            "Please provide an amount and a description to log your expense.",
        ),
        "ja": (
            "支出金額が見つかりませんでした。「昼食に500円使いました」など金額を含めて入力してください。",
            "金額が検出されませんでした。「食料品に3000円使いました」など試してください。",
            "金額と内容を入力してください（例：「ガソリンに2000円使いました」）。",
            "支出が見つかりませんでした。「夕食に1500円使いました」など試してください。",
        ),
        "zh": (
            "未偵測到支出金額。請包含類似「午餐12美元」這樣的內容。",
            "沒有偵測到金額。試試「買雜貨花了30美元」。",
            "請輸入帶金額的支出，例如「加油花了20美元」。",
            "未找到支出。試試「我花了15美元吃晚餐」。",
        ),
    },
}

NOTIFICATIONS: Final[dict[str, dict[str, tuple[str, ...]]]] = {
    "cleared": {
        "en": (
            "All your data has been cleared, {user}! Ready for a fresh start? 🆕",
            "Clean slate time, {user}! All expenses wiped clean. Let's start tracking again! ✨",
            "Data cleared successfully, {user}! Time to build new spending habits! 🚀",
        ),
        "ja": (
            "すべてのデータが削除されました、{user}さん！新しいスタートの準備はできましたか？🆕",
            "クリーンスレートの時間です、{user}さん！すべての支出がクリアされました。また記録を始めましょう！✨",
            "データが正常に削除されました、{user}さん！新しい支出習慣を築く時間です！🚀",
        ),
        "zh": (
            "所有資料已清除，{user}！準備好重新開始了嗎？🆕",
            "重新開始的時候到了，{user}！所有支出都已清除。讓我們重新開始記帳！✨",
            "資料清除成功，{user}！是時候建立新的消費習慣了！🚀",
        ),
    },
    "updated": {
        "en": (
            "Got it, {user}! I've updated your expense. ✏️",
            "Perfect! Your expense has been updated, {user}! 📝",
            "Changes saved successfully, {user}! ✅",
        ),
        "ja": (
            "了解しました、{user}さん！支出を更新しました。✏️",
            "完璧！支出が更新されました、{user}さん！📝",
            "変更が正常に保存されました、{user}さん！✅",
        ),
        "zh": (
            "明白了，{user}！我已經更新了您的支出。✏️",
            "完美！您的支出已更新，{user}！📝",
            "更改保存成功，{user}！✅",
        ),
    },
    "deleted": {
        "en": (
            "Expense deleted, {user}! 🗑️",
            "Gone! That expense has been removed, {user}! ✨",
            "Deleted successfully, {user}! One less expense to worry about! 👍",
        ),
        "ja": (
            "支出を削除しました、{user}さん！🗑️",
            "削除完了！その支出は削除されました、{user}さん！✨",
            "正常に削除されました、{user}さん！心配する支出が一つ減りました！👍",
        ),
        "zh": (
            "支出已刪除，{user}！🗑️",
            "刪除了！那筆支出已被移除，{user}！✨",
            "刪除成功，{user}！少了一筆需要擔心的支出！👍",
        ),
    },
}

WELCOME_MESSAGES: Final[dict[str, str]] = {
    "en": (
        "Hey there, {user}! I'm your expense tracking buddy. "
        "Just tell me what you spent money on and I'll keep track of it."
    ),
    "ja": (
        "こんにちは、{user}さん！私はあなたの支出管理アシスタントです。"
        "支出を教えてください。例：「コーヒーに500円使いました」"
    ),
    "zh": "你好，{user}！我是您的支出跟踪助手。请告诉我您的支出。例如：\"我花了15美元买咖啡\"",
    "bilingual": (
        "こんにちは、{user}さん！/ Hey there, {user}! 私はあなたの支出管理アシスタントです。"
        "/ I'm your expense tracking buddy. 支出を教えてください！/ Just tell me what you spent!"
    ),
}

TAG_LABELS: Final[dict[str, str]] = {
    "en": "Tagged with",
    "ja": "タグ付け",
    "zh": "标签",
    "bilingual": "タグ付け / Tagged with",
}


def pool_language(language: str) -> str:
    """Return the pool key for ``language``; bilingual reads English pools."""

    return language if language in ("ja", "zh") else "en"


def _render(template: str, *, user: str, expense: Expense | None = None) -> str:
    if expense is None:
        return template.format(user=user)
    return template.format(
        user=user,
        amount=format_amount(expense.amount),
        description=expense.description,
    )


class ResponseGenerator:
    """Select and render bot replies for expenses, misses and notifications."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def expense_pool(self, category: str, personality: str, language: str) -> Sequence[str]:
        """Return the unrendered templates for an expense reply."""

        language = pool_language(language)
        if personality == "neutral":
            return NEUTRAL_RESPONSES[language]
        pools = EXPENSE_RESPONSES[personality][language]
        return pools.get(category) or pools[DEFAULT_CATEGORY]

    def expense_candidates(self, expense: Expense, settings: ChatbotSettings) -> list[str]:
        """Return every reply :meth:`expense_response` could produce, without tags."""

        pool = self.expense_pool(expense.category, settings.personality, settings.language)
        return [_render(item, user=settings.display_name, expense=expense) for item in pool]

    def expense_response(self, expense: Expense, settings: ChatbotSettings) -> str:
        user = settings.display_name
        if settings.language == "bilingual":
            japanese = self.expense_pool(expense.category, settings.personality, "ja")[0]
            english = self.expense_pool(expense.category, settings.personality, "en")[0]
            response = (
                f"{_render(japanese, user=user, expense=expense)} / "
                f"{_render(english, user=user, expense=expense)}"
            )
        else:
            pool = self.expense_pool(expense.category, settings.personality, settings.language)
            response = _render(self._rng.choice(pool), user=user, expense=expense)

        if expense.tags:
            label = TAG_LABELS.get(settings.language, TAG_LABELS["en"])
            tag_text = ", ".join(f"#{tag}" for tag in expense.tags)
            response += f" {label}: {tag_text}"
        return response

    def error_pool(self, settings: ChatbotSettings) -> Sequence[str]:
        personality = settings.personality if settings.personality in ERROR_RESPONSES else "neutral"
        # Bilingual users get the English pool here, unlike expense replies.
        return ERROR_RESPONSES[personality][pool_language(settings.language)]

    def error_response(self, settings: ChatbotSettings) -> str:
        template = self._rng.choice(self.error_pool(settings))
        return _render(template, user=settings.display_name)

    def notification(self, kind: str, settings: ChatbotSettings) -> str:
        """Return a random ``cleared``, ``updated`` or ``deleted`` confirmation."""

        pools = NOTIFICATIONS[kind]
        user = settings.display_name
        if settings.language == "bilingual":
            return f"{_render(pools['ja'][0], user=user)} / {_render(pools['en'][0], user=user)}"
        pool = pools[pool_language(settings.language)]
        return _render(self._rng.choice(pool), user=user)

    @staticmethod
    def welcome_message(settings: ChatbotSettings) -> str:
        template = WELCOME_MESSAGES.get(settings.language, WELCOME_MESSAGES["en"])
        return _render(template, user=settings.display_name)


__all__ = [
    "ERROR_RESPONSES",
    "EXPENSE_RESPONSES",
    "NEUTRAL_RESPONSES",
    "NOTIFICATIONS",
    "ResponseGenerator",
    "TAG_LABELS",
    "WELCOME_MESSAGES",
    "pool_language",
]
