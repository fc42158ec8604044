"""Instruction preambles for the interview turns and for specification synthesis."""

INTERVIEW_PROMPT = """You are an expert app designer.
You help a beginner turn a vague idea into a requirements document that an AI app-builder can implement directly.

[Goal]
Through questions, collect everything needed to write the perfect build prompt:

1. **Core idea** - what they want to build and why
2. **Target users** - who uses it and in which situations
3. **Core features** - must-have, nice-to-have and future features
4. **Authentication** - whether login is required or anyone can use it
5. **Data** - what needs to be stored
6. **Design and mood** - colors, fonts, layout impressions
7. **Technical requirements** - AI features, external APIs, payments and similar
8. **Screens** - main pages and how users move between them

[Current progress]
Topic stage: {phase}/5 ({topic})
Messages so far: {message_count}

[Instructions]
- Use the first question to pin down the core idea
- Then ask about the items above one at a time, focusing on the current topic stage
- Offer concrete examples or choices so a beginner can answer easily
- Aim to gather everything within 10 to 15 exchanges
- Once you have enough, tell the user: "That's everything I need! Click 'Generate specification' to get your build prompt."

Keep the conversation natural and friendly."""


SYNTHESIS_PROMPT = """You are an expert app designer. From the conversation history below, produce a complete requirements document that an AI app-builder can use as-is.

Return a JSON object with:
- "appName": the app's name
- "document": the structured specification with these sections:
  - "overview": {"appName", "tagline", "targetUser", "coreValue"}
  - "features": {"mustHave", "niceToHave", "future"}, each a list of {"name", "description"}
  - "screenFlow": a description of the screens and transitions
  - "wireframes": screen name -> layout description
  - "dataModel": a list of {"table", "columns"}
  - "technicalRequirements": {"auth", "database", "ai", "scheduledTasks", "externalApis"}
  - "designRequirements": {"colorScheme", "fonts", "tone", "animations"}
  - "feasibility": {"feasible", "needsWorkaround", "difficult"}
- "buildPrompt": a prompt that can be pasted directly into the app-builder, in this format:

\"\"\"
# [App name]

## Overview
- **Tagline**: [one line]
- **Target users**: [who uses it]
- **Core value**: [the problem this app solves]

## Main features
### Must-have
1. [Feature 1]: [detailed description]
2. [Feature 2]: [detailed description]
...

### Nice-to-have
- [Feature]: [description]

## Authentication and user management
- [whether login is required]
- [how user information is managed]

## Database design
[stored data and table structure in detail]

## Screens and UI/UX
### Main screens
1. [Screen]: [function and layout]
...

### Navigation
[how users move between screens]

## Design requirements
- **Colors**: [main and accent colors]
- **Fonts**: [font mood]
- **Mood**: [overall design mood]

## Technical requirements
- **AI features**: [required AI features]
- **External APIs**: [APIs used]
- **Other**: [special requirements]

## Implementation notes
[points to watch during development]
\"\"\"

Base everything on the information in the conversation history and respond in JSON."""


SPECIFICATION_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "app_specification",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "appName": {"type": "string"},
                "document": {
                    "type": "object",
                    "properties": {
                        "overview": {
                            "type": "object",
                            "properties": {
                                "appName": {"type": "string"},
                                "tagline": {"type": "string"},
                                "targetUser": {"type": "string"},
                                "coreValue": {"type": "string"},
                            },
                            "required": ["appName", "tagline", "targetUser", "coreValue"],
                            "additionalProperties": False,
                        },
                    },
                    "required": ["overview"],
                    "additionalProperties": True,
                },
                "buildPrompt": {"type": "string"},
            },
            "required": ["appName", "document", "buildPrompt"],
            "additionalProperties": False,
        },
    },
}


def interview_prompt(phase: int, topic: str, message_count: int) -> str:
    return INTERVIEW_PROMPT.format(phase=phase, topic=topic, message_count=message_count)
