from dotenv import load_dotenv

# Import the necessary components
from llm_stream_processor import LlmStreamProcessor, StreamCallbacks
from llm_stream_processor.config import get_settings
from llm_stream_processor.logging import setup_logging

# Load LLM_STREAM_* settings from .env
load_dotenv()


# Chunks as a DeepSeek-style model might stream them over SSE
SSE_PAYLOADS = [
    'data: {"choices":[{"delta":{"content":"<think>The user wants"}}]}\n\n',
    'data: {"choices":[{"delta":{"content":" a JSON city list."}}]}\n\n',
    'data: {"choices":[{"delta":{"content":"</think>```json\\n"}}]}\n\n',
    'data: {"choices":[{"delta":{"content":"{\\"cities\\": [\\"Oslo\\", \\"Lima\\"]}"}}]}\n\n',
    'data: {"choices":[{"delta":{"content":"\\n```"}}]}\n\ndata: [DONE]\n\n',
]


def main():
    setup_logging()

    # 1. Create the processor from LLM_STREAM_* settings
    processor = LlmStreamProcessor.from_settings(get_settings())

    # 2. Define the callbacks you care about; the rest stay None
    callbacks = StreamCallbacks(
        on_reasoning_start=lambda: print("[Reasoning]: ", end="", flush=True),
        on_reasoning_chunk=lambda text: print(text, end="", flush=True),
        on_reasoning_finish=lambda full: print(),
        on_output_start=lambda: print("Answer: ", end="", flush=True),
        on_output_chunk=lambda text: print(text, end="", flush=True),
        on_finish=lambda reasoning, output, parsed: print(f"\n\nParsed JSON: {parsed}"),
        on_failure=lambda error: print(f"\nError: {error}"),
    )

    # 3. Feed raw payloads as they arrive
    # Option A: plain text chunks
    # processor.process("<think>...</think>answer", callbacks)

    # Option B: raw provider records (Ollama / OpenAI SSE)
    for payload in SSE_PAYLOADS:
        processor.process_chunk(payload, callbacks)

    # 4. Finalize once the transport is done (no-op if already finalized)
    processor.finalize()


if __name__ == "__main__":
    main()
