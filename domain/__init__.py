"""Turns a list of ingredients into a recipe and a recipe into a document.

Pieces, leaves first:

- `prompts` builds the instruction for the model.
- `gemini` talks to the generation service and classifies its failures.
- `llm_service` is what the rest of the code asks for a recipe.
- `markdown` strips the model's formatting for fixed-layout output.
- `pdf` lays the recipe out and emits the bytes.
- `services` composes them per request.

Nothing here outlives a request except the generation client, which holds a
key and a model name and nothing else.
"""
