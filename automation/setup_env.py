#!/usr/bin/env python3
"""
Helper script to create a .env file for the climate-jobs backend.
"""

import os

ENV_TEMPLATE = """# Supabase (auth, tables, proof media storage)
SUPABASE_URL=https://YOURPROJECT.supabase.co
SUPABASE_SERVICE_ROLE_KEY=YOUR_SERVICE_KEY
MEDIA_BUCKET=micro-job-media

# Proof-of-work OCR (image-to-text inference endpoint)
HF_API_URL=https://api-inference.huggingface.co
HF_API_TOKEN=
# Comma separated, tried in order: handwritten before printed, large before base
OCR_MODELS=microsoft/trocr-large-handwritten,microsoft/trocr-base-handwritten,microsoft/trocr-large-printed,microsoft/trocr-base-printed
OCR_TIMEOUT_SECONDS=60
MAX_PROOF_BYTES=10485760

# LLM (quiz questions, job recommendations)
GROQ_API_URL=https://api.groq.com/openai/v1
GROQ_API_KEY=
GROQ_MODEL=llama-3.3-70b-versatile

# Server
HOST=0.0.0.0
PORT=8080
FLASK_ENV=production
LOG_LEVEL=INFO
"""

def main(env_path=None):
    env_path = env_path or os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env")

    if os.path.exists(env_path):
        print(f".env file already exists at {env_path}")
        response = input("Overwrite? (y/N): ")
        if response.lower() != 'y':
            print("Skipping .env creation")
            return

    with open(env_path, 'w') as f:
        f.write(ENV_TEMPLATE)

    print(f"Created .env file at {env_path}")
    print("Please edit .env and set SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, HF_API_TOKEN and GROQ_API_KEY")

if __name__ == "__main__":
    main()
