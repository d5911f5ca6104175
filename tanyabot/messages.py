"""User-facing reply texts (Indonesian)."""

from __future__ import annotations

COMMAND_USAGE = "Gunakan perintah:\n/tanya [pertanyaan]\n/gambar [deskripsi gambar]"

NO_ANSWER = "Maaf, tidak ada jawaban."
ANSWER_FAILED = "Terjadi kesalahan saat menjawab."
IMAGE_NOT_GENERATED = "Maaf, gambar tidak dapat dibuat."
IMAGE_GENERATION_FAILED = "Kesalahan saat membuat gambar."
IMAGE_EDIT_FAILED = "Gagal memproses gambar."

EMPTY_PROMPT = {
    "image": "Deskripsi gambar tidak boleh kosong. Contoh: /gambar kucing memakai topi",
}
EMPTY_PROMPT_DEFAULT = "Perintah tidak boleh kosong."

PROMPT_FOR_REPLY = (
    "Balas (reply) salah satu pesan untuk melanjutkan percakapan, atau gunakan perintah:\n"
    "/tanya [pertanyaan] untuk bertanya\n"
    "/gambar [deskripsi gambar] untuk membuat gambar"
)


def help_text(header: str = "") -> str:
    """Return the /help reply with an optional author/channel header."""

    header = header.strip()
    if header:
        return f"{header}\n\n{COMMAND_USAGE}"
    return COMMAND_USAGE


def empty_prompt_text(kind: str) -> str:
    return EMPTY_PROMPT.get(kind, EMPTY_PROMPT_DEFAULT)
