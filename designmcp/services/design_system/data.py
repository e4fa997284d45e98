"""Static design-system content served over RPC. Read-only."""

from __future__ import annotations

from typing import Any

DESIGN_SYSTEM: dict[str, Any] = {
    "name": "ACME Design System",
    "version": "2.0.0",
    "description": "A comprehensive design system for building consistent, accessible, and beautiful user interfaces.",
    "components": [
        {
            "name": "Button",
            "description": "A versatile button component that supports multiple variants, sizes, and states.",
            "category": "Actions",
            "importStatement": "import { Button } from '@acme/ui'",
            "props": [
                {"name": "variant", "type": "'primary' | 'secondary' | 'ghost' | 'danger'", "required": False, "default": "'primary'", "description": "Visual style variant"},
                {"name": "size", "type": "'sm' | 'md' | 'lg'", "required": False, "default": "'md'", "description": "Size of the button"},
                {"name": "disabled", "type": "boolean", "required": False, "default": "false", "description": "Whether disabled"},
                {"name": "loading", "type": "boolean", "required": False, "default": "false", "description": "Shows loading spinner"},
                {"name": "leftIcon", "type": "ReactNode", "required": False, "description": "Icon on left side"},
                {"name": "rightIcon", "type": "ReactNode", "required": False, "description": "Icon on right side"},
                {"name": "fullWidth", "type": "boolean", "required": False, "default": "false", "description": "Take full width"},
                {"name": "onClick", "type": "() => void", "required": False, "description": "Click handler"},
                {"name": "children", "type": "ReactNode", "required": True, "description": "Button content"},
            ],
            "examples": [
                {"title": "Basic Usage", "code": '<Button>Default</Button>\n<Button variant="secondary">Secondary</Button>'},
                {"title": "With Icons", "code": "<Button leftIcon={<PlusIcon />}>Add Item</Button>"},
                {"title": "Loading State", "code": "<Button loading>Submitting...</Button>"},
            ],
            "relatedComponents": ["IconButton", "ButtonGroup", "Link"],
        },
        {
            "name": "Input",
            "description": "A form input component for text entry with validation states, labels, and helper text.",
            "category": "Forms",
            "importStatement": "import { Input } from '@acme/ui'",
            "props": [
                {"name": "type", "type": "'text' | 'email' | 'password' | 'number'", "required": False, "default": "'text'", "description": "Input type"},
                {"name": "label", "type": "string", "required": False, "description": "Label text"},
                {"name": "placeholder", "type": "string", "required": False, "description": "Placeholder text"},
                {"name": "error", "type": "string", "required": False, "description": "Error message"},
                {"name": "helperText", "type": "string", "required": False, "description": "Helper text"},
                {"name": "disabled", "type": "boolean", "required": False, "default": "false", "description": "Whether disabled"},
                {"name": "required", "type": "boolean", "required": False, "default": "false", "description": "Whether required"},
            ],
            "examples": [
                {"title": "Basic Input", "code": '<Input label="Email" placeholder="Enter email" />'},
                {"title": "With Error", "code": '<Input label="Email" error="Invalid email" />'},
            ],
            "relatedComponents": ["TextArea", "Select", "FormField"],
        },
        {
            "name": "Card",
            "description": "A container for grouping related content with optional header and footer.",
            "category": "Layout",
            "importStatement": "import { Card, CardHeader, CardBody, CardFooter } from '@acme/ui'",
            "props": [
                {"name": "variant", "type": "'elevated' | 'outlined' | 'filled'", "required": False, "default": "'elevated'", "description": "Visual style"},
                {"name": "padding", "type": "'none' | 'sm' | 'md' | 'lg'", "required": False, "default": "'md'", "description": "Internal padding"},
                {"name": "hoverable", "type": "boolean", "required": False, "default": "false", "description": "Show hover effects"},
                {"name": "children", "type": "ReactNode", "required": True, "description": "Card content"},
            ],
            "examples": [
                {"title": "Basic Card", "code": "<Card><CardBody>Content</CardBody></Card>"},
            ],
            "relatedComponents": ["Paper", "Box", "Container"],
        },
        {
            "name": "Modal",
            "description": "A dialog overlay for focused interactions and confirmations.",
            "category": "Overlays",
            "importStatement": "import { Modal, ModalHeader, ModalBody, ModalFooter } from '@acme/ui'",
            "props": [
                {"name": "isOpen", "type": "boolean", "required": True, "description": "Whether visible"},
                {"name": "onClose", "type": "() => void", "required": True, "description": "Close callback"},
                {"name": "size", "type": "'sm' | 'md' | 'lg' | 'xl'", "required": False, "default": "'md'", "description": "Modal size"},
                {"name": "closeOnOverlayClick", "type": "boolean", "required": False, "default": "true", "description": "Close on overlay click"},
            ],
            "examples": [
                {"title": "Confirmation", "code": "<Modal isOpen={isOpen} onClose={close}><ModalBody>Confirm?</ModalBody></Modal>"},
            ],
            "relatedComponents": ["Dialog", "Drawer", "AlertDialog"],
        },
        {
            "name": "Avatar",
            "description": "Display user profile images with fallback to initials.",
            "category": "Data Display",
            "importStatement": "import { Avatar, AvatarGroup } from '@acme/ui'",
            "props": [
                {"name": "src", "type": "string", "required": False, "description": "Image URL"},
                {"name": "name", "type": "string", "required": False, "description": "Name for initials fallback"},
                {"name": "size", "type": "'xs' | 'sm' | 'md' | 'lg' | 'xl'", "required": False, "default": "'md'", "description": "Avatar size"},
                {"name": "status", "type": "'online' | 'offline' | 'away'", "required": False, "description": "Status indicator"},
            ],
            "examples": [
                {"title": "Basic", "code": '<Avatar src="/user.jpg" />\n<Avatar name="John Doe" />'},
            ],
            "relatedComponents": ["Badge", "UserCard"],
        },
        {
            "name": "Toast",
            "description": "Notification component for brief messages about actions or events.",
            "category": "Feedback",
            "importStatement": "import { useToast } from '@acme/ui'",
            "props": [
                {"name": "title", "type": "string", "required": False, "description": "Toast title"},
                {"name": "description", "type": "string", "required": False, "description": "Toast message"},
                {"name": "status", "type": "'info' | 'success' | 'warning' | 'error'", "required": False, "default": "'info'", "description": "Toast type"},
                {"name": "duration", "type": "number", "required": False, "default": "5000", "description": "Auto-dismiss time in ms"},
            ],
            "examples": [
                {"title": "Success Toast", "code": 'toast({ title: "Success!", status: "success" })'},
            ],
            "relatedComponents": ["Alert", "Notification"],
        },
    ],
    "styleGuide": {
        "colors": [
            {
                "name": "Primary",
                "description": "Primary brand colors",
                "colors": [
                    {"name": "primary-50", "value": "#EEF2FF", "usage": "Subtle backgrounds"},
                    {"name": "primary-500", "value": "#6366F1", "usage": "Primary buttons, links"},
                    {"name": "primary-700", "value": "#4338CA", "usage": "Active/pressed states"},
                    {"name": "primary-900", "value": "#312E81", "usage": "Headings"},
                ],
            },
            {
                "name": "Neutral",
                "description": "Grayscale colors",
                "colors": [
                    {"name": "gray-50", "value": "#F9FAFB", "usage": "Page backgrounds"},
                    {"name": "gray-500", "value": "#6B7280", "usage": "Secondary text"},
                    {"name": "gray-900", "value": "#111827", "usage": "Primary text"},
                ],
            },
            {
                "name": "Semantic",
                "description": "Status and feedback colors",
                "colors": [
                    {"name": "success", "value": "#10B981", "description": "Success states"},
                    {"name": "warning", "value": "#F59E0B", "description": "Warning states"},
                    {"name": "error", "value": "#EF4444", "description": "Error states"},
                    {"name": "info", "value": "#3B82F6", "description": "Info states"},
                ],
            },
        ],
        "typography": [
            {"name": "h1", "fontFamily": "Inter, sans-serif", "fontSize": "2.25rem", "fontWeight": "700", "lineHeight": "1.2", "usage": "Page headings"},
            {"name": "h2", "fontFamily": "Inter, sans-serif", "fontSize": "1.875rem", "fontWeight": "600", "lineHeight": "1.25", "usage": "Section headings"},
            {"name": "body", "fontFamily": "Inter, sans-serif", "fontSize": "1rem", "fontWeight": "400", "lineHeight": "1.75", "usage": "Default body text"},
            {"name": "caption", "fontFamily": "Inter, sans-serif", "fontSize": "0.75rem", "fontWeight": "400", "lineHeight": "1.5", "usage": "Labels, helper text"},
        ],
        "spacing": [
            {"name": "1", "value": "0.25rem", "pixels": 4},
            {"name": "2", "value": "0.5rem", "pixels": 8},
            {"name": "4", "value": "1rem", "pixels": 16},
            {"name": "6", "value": "1.5rem", "pixels": 24},
            {"name": "8", "value": "2rem", "pixels": 32},
            {"name": "12", "value": "3rem", "pixels": 48},
            {"name": "16", "value": "4rem", "pixels": 64},
        ],
        "breakpoints": [
            {"name": "sm", "value": "640px", "description": "Small devices"},
            {"name": "md", "value": "768px", "description": "Medium devices"},
            {"name": "lg", "value": "1024px", "description": "Large devices"},
            {"name": "xl", "value": "1280px", "description": "Extra large devices"},
        ],
    },
}
