"""
Question table structure (Supabase)

Table: questions
- id: UUID (primary key)
- exam_id: UUID (foreign key to exams.id)
- question_text: TEXT (not null)
- question_type: TEXT (multiple_choice | true_false | short_answer | essay)
- options: JSONB (list of strings, multiple choice only)
- correct_answer: TEXT (required for multiple_choice and true_false)
- points: INTEGER (default 1, >= 1)
- created_at: TIMESTAMP

Questions are listed in created_at order. correct_answer is never sent to
students taking the exam.
"""
