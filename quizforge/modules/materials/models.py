# Supabase table: materials
# Files live in the "documents" storage bucket under {class_id}/{uuid}-{filename}

"""
Expected Supabase table structure:

materials:
- id: uuid (primary key)
- title: text (not null)
- description: text (nullable)
- class_id: uuid (foreign key to classes.id)
- tutor_id: uuid (foreign key to auth.users.id) - owner
- file_path: text (object key inside the documents bucket)
- file_url: text (public URL)
- file_type: text (extension, e.g. "pdf")
- file_size: bigint (bytes)
- created_at: timestamp (default: now())
"""
