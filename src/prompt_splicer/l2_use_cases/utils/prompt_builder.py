"""Pure functions for building the LLM message lists of each operation."""

from __future__ import annotations

from prompt_splicer.l1_entities.chat_message import ChatMessage

SEGMENTIZE_SYSTEM_PROMPT = """\
You are an expert at analyzing and breaking down large prompts into logical, coherent sections.

Your task is to:
1. Analyze the given prompt and identify distinct logical sections/topics
2. Break it into meaningful segments that make sense independently
3. Give each segment a clear, descriptive title
4. Preserve all the original content - don't summarize or omit anything
5. Return the result as a JSON array of objects with "title" and "content" fields

Example format:
[
  {
    "title": "Introduction and Context",
    "content": "The original text content for this section..."
  },
  {
    "title": "Main Requirements",
    "content": "The original text content for this section..."
  }
]

Make sure each segment is substantial enough to be useful but focused enough to be coherent."""

CONDENSE_SYSTEM_PROMPT = """\
You are an expert editor focused on making text more concise while preserving all important information and meaning.

Your task is to:
1. Remove redundancy and unnecessary words
2. Combine similar ideas efficiently
3. Use more precise and direct language
4. Maintain the original tone and intent
5. Keep all essential information and details
6. Return only the revised text, no explanations

The goal is to make the text clearer and more efficient, not to change its meaning or remove important content."""


def build_segmentize_messages(prompt: str) -> list[ChatMessage]:
    return [
        ChatMessage(role='system', content=SEGMENTIZE_SYSTEM_PROMPT),
        ChatMessage(role='user', content=f'Please break this prompt into logical sections:\n\n{prompt}'),
    ]


def build_condense_messages(content: str) -> list[ChatMessage]:
    return [
        ChatMessage(role='system', content=CONDENSE_SYSTEM_PROMPT),
        ChatMessage(role='user', content=f'Please make this text more concise:\n\n{content}'),
    ]
