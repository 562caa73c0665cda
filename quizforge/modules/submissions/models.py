"""
Submission table structure (Supabase)

Table: exam_submissions
- id: UUID (primary key)
- exam_id: UUID (foreign key to exams.id)
- student_name: TEXT
- matric_number: TEXT
- score: INTEGER (points earned on auto-graded questions)
- max_score: INTEGER (sum of points over all exam questions)
- started_at: TIMESTAMP (nullable, reported by the client)
- completed_at: TIMESTAMP

Table: submission_answers
- id: UUID (primary key)
- submission_id: UUID (foreign key to exam_submissions.id)
- question_id: UUID (foreign key to questions.id)
- answer: TEXT
- is_correct: BOOLEAN (null for essay questions)
- points_earned: INTEGER (null for essay questions)

Submissions are public: students identify themselves by name and matric
number together with the exam access code.
"""
