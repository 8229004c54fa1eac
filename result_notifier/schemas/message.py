from pydantic import BaseModel


class AttachmentField(BaseModel):
    model_config = {"frozen": True}

    title: str
    value: str = ""
    short: bool = False


class Attachment(BaseModel):
    model_config = {"frozen": True}

    color: str = "danger"
    fields: tuple[AttachmentField, ...] = ()


class SlackMessage(BaseModel):
    """One outgoing webhook message. Immutable: every change returns a copy."""
    model_config = {"frozen": True}

    text: str = ""
    channel: str | None = None
    username: str | None = None
    icon: str | None = None  # ":emoji:" or an image URL
    attachments: tuple[Attachment, ...] = ()

    def with_channel(self, channel: str) -> "SlackMessage":
        return self.model_copy(update={"channel": channel})

    def with_text(self, text: str) -> "SlackMessage":
        return self.model_copy(update={"text": text})

    def attach(self, attachment: Attachment) -> "SlackMessage":
        return self.model_copy(update={"attachments": self.attachments + (attachment,)})

    def to_payload(self) -> dict:
        """Build the JSON body for a Slack incoming webhook."""
        payload: dict = {"text": self.text, "mrkdwn": True}
        if self.channel is not None:
            payload["channel"] = self.channel
        if self.username:
            payload["username"] = self.username
        if self.icon:
            if self.icon.startswith(":") and self.icon.endswith(":"):
                payload["icon_emoji"] = self.icon
            else:
                payload["icon_url"] = self.icon
        if self.attachments:
            payload["attachments"] = [a.model_dump(mode="json") for a in self.attachments]
        return payload
