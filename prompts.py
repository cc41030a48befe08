"""
prompts.py
----------
Static documentation prompts served alongside the tools.
"""

from dataclasses import dataclass
from typing import Callable, Dict

NODEJS_SETUP_RESEND = """
# Node.js Setup for Resend

Set up the Resend SDK in a Node.js project to send emails and manage contacts.

## Prerequisites

- Node.js 18 or newer
- A Resend account and an API key

## Installation

```bash
npm install resend
# or
yarn add resend
# or
pnpm add resend
```

## Basic Setup

Keep the API key out of source control:

```.env
RESEND_API_KEY=re_xxxxxxxxx
```

```typescript
import { Resend } from 'resend';

const resend = new Resend(process.env.RESEND_API_KEY);
```

## Sending an Email

```typescript
const { data, error } = await resend.emails.send({
  from: 'onboarding@resend.dev',
  to: ['delivered@resend.dev'],
  subject: 'Hello from Resend',
  text: 'Hello world!',
});

if (error) {
  console.error('Error:', error);
} else {
  console.log('Email sent:', data);
}
```

## Scheduling an Email

`scheduledAt` takes an ISO 8601 timestamp or natural language such as
`"in 1 hour"` or `"tomorrow at 9am"`. Emails can be scheduled up to 30 days ahead.

```typescript
await resend.emails.send({
  from: 'onboarding@resend.dev',
  to: 'user@example.com',
  subject: 'Later',
  text: 'This arrives in an hour.',
  scheduledAt: 'in 1 hour',
});
```

## Creating a Contact

```typescript
const { data, error } = await resend.contacts.create({
  email: 'user@example.com',
  firstName: 'John',
  lastName: 'Doe',
  unsubscribed: false,
  audienceId: 'your-audience-id',
});
```

## Listing Audiences

```typescript
const { data, error } = await resend.audiences.list();
```

## TypeScript Support

Types ship with the package:

```typescript
import type { CreateEmailOptions } from 'resend';

const emailOptions: CreateEmailOptions = {
  from: 'onboarding@resend.dev',
  to: 'user@example.com',
  subject: 'Typed Email',
  text: 'This email is fully typed!',
};

await resend.emails.send(emailOptions);
```

## Error Handling

The SDK returns API errors in `error` instead of throwing; network failures still throw.

```typescript
try {
  const { data, error } = await resend.emails.send({ /* ... */ });
  if (error) {
    throw new Error(`Failed to send email: ${error.message}`);
  }
} catch (err) {
  console.error('Network or other error:', err);
}
```

## Next Steps

1. Get an API key from the [Resend Dashboard](https://resend.com/api-keys)
2. Verify a sending domain
3. Create audiences to manage contacts
4. Explore templates and webhooks

Full documentation: https://resend.com/docs
"""


@dataclass
class PromptSpec:
    name: str
    title: str
    description: str
    render: Callable[[], str]


PROMPTS: Dict[str, PromptSpec] = {
    "nodejs-setup-resend": PromptSpec(
        name="nodejs-setup-resend",
        title="Node.js Setup for Resend",
        description="Guide for installing and using the Resend SDK in a Node.js project",
        render=lambda: NODEJS_SETUP_RESEND.strip(),
    ),
}


def get_prompt(name: str) -> str:
    if name not in PROMPTS:
        raise ValueError(f"Unknown prompt: {name}")
    return PROMPTS[name].render()
