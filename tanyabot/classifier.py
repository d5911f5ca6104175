"""Map each inbound chat event to exactly one bot action.

Rules are evaluated top to bottom and the first one that returns an action
wins. Every rule is a pure function of the event and the bot identity, so the
order of ``RULES`` is the whole routing policy:

1. the bot itself joined the chat -> help broadcast
2. /start, /help -> help
3. /tanya <question> -> answer (never when replying to the bot)
4. /gambar <prompt> -> edit the attached/replied image, or generate one
5. an image with a caption or reply text -> edit (groups only when addressed)
6. plain text -> continue a reply chain (groups only when addressed)
7. anything else -> ignore
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from tanyabot.commands import ASK_COMMAND, IMAGE_COMMAND, command_remainder, is_help_request
from tanyabot.models import (
    Action,
    AnswerQuestion,
    BotIdentity,
    ChatEvent,
    ChatKind,
    EditImage,
    GenerateImage,
    Ignore,
    ImageRef,
    PromptForReply,
    RejectEmptyPrompt,
    ShowHelp,
)

IMAGE_PROMPT = "image"


@dataclass(frozen=True, slots=True)
class _Facts:
    """Derived facts about one event, computed once per classification."""

    event: ChatEvent
    identity: BotIdentity | None

    @property
    def username(self) -> str | None:
        if self.identity is None or not self.identity.username:
            return None
        return self.identity.username

    @property
    def mention(self) -> str | None:
        return f"@{self.username}" if self.username else None

    @property
    def is_mentioned(self) -> bool:
        mention = self.mention
        if mention is None:
            return False
        return mention in (self.event.text or "") or mention in (self.event.caption or "")

    @property
    def is_reply_to_bot(self) -> bool:
        replied = self.event.replied_event
        if self.identity is None or replied is None:
            return False
        return replied.sender_id == self.identity.id

    @property
    def is_addressed(self) -> bool:
        return self.is_reply_to_bot or self.is_mentioned

    @property
    def image(self) -> ImageRef | None:
        """Image on this event, else on the replied event."""

        own = self.event.image_ref()
        if own is not None:
            return own
        if self.event.replied_event is not None:
            return self.event.replied_event.image_ref()
        return None

    @property
    def reply_text(self) -> str:
        replied = self.event.replied_event
        return (replied.text or "") if replied is not None else ""

    def strip_mention(self, value: str | None) -> str:
        value = value or ""
        # Plain substring removal of the first occurrence, no word boundaries.
        if self.mention:
            value = value.replace(self.mention, "", 1)
        return value.strip()


Rule = Callable[[_Facts], "Action | None"]


def _new_member_rule(facts: _Facts) -> Action | None:
    if facts.identity is not None and facts.identity.id in facts.event.new_member_ids:
        return ShowHelp(threaded=False)
    return None


def _help_rule(facts: _Facts) -> Action | None:
    if is_help_request(facts.event.text):
        return ShowHelp()
    return None


def _ask_rule(facts: _Facts) -> Action | None:
    question = command_remainder(facts.event.text, ASK_COMMAND, facts.username)
    if question is None:
        return None
    if not question or facts.is_reply_to_bot:
        return Ignore()
    return AnswerQuestion(question=question, reply_context=facts.reply_text)


def _image_command_rule(facts: _Facts) -> Action | None:
    prompt = command_remainder(facts.event.text, IMAGE_COMMAND, facts.username)
    if prompt is None:
        prompt = command_remainder(facts.event.caption, IMAGE_COMMAND, facts.username)
    if prompt is None:
        return None
    if not prompt:
        return RejectEmptyPrompt(kind=IMAGE_PROMPT)
    source = facts.image
    if source is not None:
        return EditImage(prompt=prompt, source_image=source)
    return GenerateImage(prompt=prompt)


def _image_rule(facts: _Facts) -> Action | None:
    source = facts.image
    if source is None:
        return None
    kind = facts.event.chat_kind
    if kind is ChatKind.PRIVATE:
        prompt = (facts.event.caption or "").strip() or (facts.event.text or "").strip()
    elif kind.is_group:
        if not facts.is_addressed:
            return Ignore()
        prompt = facts.strip_mention(facts.event.caption) or facts.strip_mention(facts.event.text)
    else:
        return None
    if not prompt:
        return RejectEmptyPrompt(kind=IMAGE_PROMPT)
    return EditImage(prompt=prompt, source_image=source)


def _continuation_rule(facts: _Facts) -> Action | None:
    kind = facts.event.chat_kind
    question = facts.strip_mention(facts.event.text) or facts.strip_mention(facts.event.caption)
    if kind is ChatKind.PRIVATE:
        if not question:
            return Ignore()
        if facts.reply_text:
            return AnswerQuestion(question=question, reply_context=facts.reply_text)
        return PromptForReply()
    if kind.is_group:
        if not facts.is_addressed or not question:
            return Ignore()
        return AnswerQuestion(question=question, reply_context=facts.reply_text)
    return None


def _fallback_rule(facts: _Facts) -> Action | None:
    return Ignore()


RULES: tuple[Rule, ...] = (
    _new_member_rule,
    _help_rule,
    _ask_rule,
    _image_command_rule,
    _image_rule,
    _continuation_rule,
    _fallback_rule,
)


def classify(event: ChatEvent, identity: BotIdentity | None) -> Action:
    """Return the single action the bot should take for ``event``."""

    facts = _Facts(event=event, identity=identity)
    for rule in RULES:
        action = rule(facts)
        if action is not None:
            return action
    return Ignore()
